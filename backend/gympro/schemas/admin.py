from datetime import datetime
from typing import Literal, Optional

from pydantic import StrictBool

from gympro.schemas.common import CamelModel


class RoleUpdate(CamelModel):
    role: Literal["USER", "TRAINER", "ADMIN"]


class StatusUpdate(CamelModel):
    is_active: StrictBool


class AdminUserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None
    role: str
    subscription_status: str
    is_active: bool
    email_verified: bool
    created_at: datetime
    updated_at: datetime


class UserActivityCounts(CamelModel):
    workout_sessions: int = 0
    custom_workouts: int = 0
    posts: int = 0
    orders: int = 0


class AdminUserDetail(AdminUserResponse):
    counts: UserActivityCounts
