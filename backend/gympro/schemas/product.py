"""Shop catalog schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from gympro.schemas.common import CamelModel, UrlStr, reject_null

SLUG_PATTERN = r"^[a-z0-9-]+$"


class ProductCategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[UrlStr] = None
    sort_order: Optional[int] = None


class ProductCategoryCreate(ProductCategoryBase):
    pass


class ProductCategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[UrlStr] = None
    sort_order: Optional[int] = None

    @field_validator("name", "slug", "sort_order")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ProductCategoryResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int
    product_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProductCategorySummary(CamelModel):
    id: str
    name: str
    slug: str


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=2000)
    price: float = Field(..., gt=0)
    compare_price: Optional[float] = Field(None, gt=0)
    image_url: Optional[UrlStr] = None
    images: Optional[List[UrlStr]] = None
    category_id: str
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[float] = Field(None, gt=0)
    compare_price: Optional[float] = Field(None, gt=0)
    image_url: Optional[UrlStr] = None
    images: Optional[List[UrlStr]] = None
    category_id: Optional[str] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)

    @field_validator(
        "name", "slug", "price", "category_id", "is_featured", "is_active", "stock",
    )
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ProductResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    price: float
    compare_price: Optional[float] = None
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    category_id: str
    category: Optional[ProductCategorySummary] = None
    is_featured: bool
    is_active: bool
    stock: int
    created_at: datetime
    updated_at: datetime
