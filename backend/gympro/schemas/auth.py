"""Auth, user and profile schemas"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from gympro.schemas.common import CamelModel, UrlStr

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

Gender = Literal["MALE", "FEMALE", "OTHER", "PREFER_NOT_TO_SAY"]
FitnessGoal = Literal["LOSE_WEIGHT", "BUILD_MUSCLE", "STAY_FIT", "IMPROVE_FLEXIBILITY", "INCREASE_ENDURANCE"]
ExperienceLevel = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]


def _blank_to_none(v):
    if isinstance(v, str) and v == "":
        return None
    return v


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str = ""
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)


class ProfileUpdate(CamelModel):
    """Empty strings clear optional fields"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    avatar_url: Optional[UrlStr] = None
    phone: Optional[str] = Field(None, pattern=r"^\d{10}$")
    bio: Optional[str] = Field(None, max_length=500)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    height: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)
    fitness_goal: Optional[FitnessGoal] = None
    experience_level: Optional[ExperienceLevel] = None

    @field_validator(
        "avatar_url", "phone", "bio", "date_of_birth", "gender", "fitness_goal", "experience_level",
        mode="before",
    )
    @classmethod
    def empty_string_is_none(cls, v):
        return _blank_to_none(v)


class ProfileResponse(CamelModel):
    bio: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    fitness_goal: Optional[str] = None
    experience_level: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    role: str
    subscription_status: str
    is_active: bool
    email_verified: bool
    created_at: datetime
    profile: Optional[ProfileResponse] = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(TokenPair):
    user: UserResponse


class AdminStats(CamelModel):
    total_users: int
    active_users: int
    new_users_this_week: int
    total_posts: int
    total_workout_sessions: int
    total_products: int
