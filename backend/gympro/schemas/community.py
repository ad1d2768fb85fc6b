from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from gympro.schemas.common import CamelModel, UrlStr, UserSummary


class PostCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=2000)
    image_url: Optional[UrlStr] = None

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_image_is_none(cls, v):
        return v or None


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=500)


class CommentResponse(CamelModel):
    id: str
    post_id: str
    content: str
    created_at: datetime
    user: UserSummary


class PostResponse(CamelModel):
    id: str
    content: str
    image_url: Optional[str] = None
    likes_count: int
    comments_count: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    has_liked: bool = False


class PostDetail(PostResponse):
    comments: List[CommentResponse] = []


class AdminPostAuthor(UserSummary):
    email: str


class AdminPostResponse(CamelModel):
    id: str
    content: str
    image_url: Optional[str] = None
    likes_count: int
    comments_count: int
    is_published: bool
    created_at: datetime
    user: AdminPostAuthor


class LikeToggleResponse(CamelModel):
    liked: bool
    likes_count: int


class VisibilityResponse(CamelModel):
    id: str
    is_published: bool


PostFilter = Literal["all", "published", "hidden"]
