"""
Response envelope and shared schema bases
"""

import math
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, HttpUrl
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

# Validated as a URL, stored as a plain string
UrlStr = Annotated[HttpUrl, AfterValidator(str)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageResponse(BaseModel):
    message: str


class PaginatedResponse(CamelModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


def paginate(items: List[T], total: int, page: int, limit: int) -> dict:
    return {
        "data": items,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }


def reject_null(v):
    """For partial updates: a field may be left out, but not cleared"""
    if v is None:
        raise ValueError("may not be null")
    return v


def ok(data) -> dict:
    return {"success": True, "data": data}


class UserSummary(CamelModel):
    """Author / owner block embedded in other payloads"""
    id: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None


class PageParams(BaseModel):
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
