"""Order schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from gympro.schemas.common import CamelModel


class OrderItemCreate(CamelModel):
    product_id: str
    quantity: int = Field(..., ge=1, le=99)


class OrderCreate(CamelModel):
    items: List[OrderItemCreate] = Field(..., min_length=1)
    shipping_address: str = Field(..., min_length=5, max_length=500)
    contact_phone: str = Field(..., min_length=5, max_length=30)
    notes: Optional[str] = Field(None, max_length=500)


class OrderProductSummary(CamelModel):
    id: str
    name: str
    slug: str
    image_url: Optional[str] = None
    price: Optional[float] = None


class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    quantity: int
    price: float
    product: Optional[OrderProductSummary] = None


class OrderResponse(CamelModel):
    id: str
    user_id: str
    total: float
    status: str
    shipping_address: str
    contact_phone: str
    notes: Optional[str] = None
    items: List[OrderItemResponse] = []
    created_at: datetime
    updated_at: datetime
