"""Workout catalog and session schemas"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from gympro.schemas.common import CamelModel, UrlStr, reject_null

Difficulty = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]


class WorkoutCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[UrlStr] = None


class WorkoutCategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[UrlStr] = None


class WorkoutCategoryResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int
    video_count: Optional[int] = None


class WorkoutCategorySummary(CamelModel):
    id: str
    name: str
    slug: str


class WorkoutVideoCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    video_url: UrlStr
    thumbnail_url: Optional[UrlStr] = None
    duration: int = Field(..., gt=0, description="seconds")
    difficulty: Difficulty
    category_id: str
    trainer_id: Optional[str] = None
    equipment_needed: Optional[List[str]] = None
    calories_burned: Optional[int] = Field(None, gt=0)
    is_premium: bool = False


class WorkoutVideoUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    video_url: Optional[UrlStr] = None
    thumbnail_url: Optional[UrlStr] = None
    duration: Optional[int] = Field(None, gt=0)
    difficulty: Optional[Difficulty] = None
    category_id: Optional[str] = None
    trainer_id: Optional[str] = None
    equipment_needed: Optional[List[str]] = None
    calories_burned: Optional[int] = Field(None, gt=0)
    is_premium: Optional[bool] = None
    is_published: Optional[bool] = None

    @field_validator(
        "title", "video_url", "duration", "difficulty", "category_id", "is_premium", "is_published",
    )
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class WorkoutVideoSummary(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: int
    difficulty: str
    calories_burned: Optional[int] = None
    is_premium: bool
    view_count: int


class WorkoutVideoResponse(WorkoutVideoSummary):
    video_url: str
    category_id: str
    category: Optional[WorkoutCategorySummary] = None
    trainer_id: Optional[str] = None
    equipment_needed: Optional[List[str]] = None
    is_published: bool
    created_at: datetime
    updated_at: datetime


class WorkoutCategoryDetail(WorkoutCategoryResponse):
    videos: List[WorkoutVideoSummary] = []


class SessionCreate(CamelModel):
    video_id: Optional[str] = None
    custom_workout_id: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)
    calories_burned: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=1000)


class SessionComplete(CamelModel):
    duration: Optional[int] = Field(None, gt=0)
    calories_burned: Optional[int] = Field(None, ge=0)


class SessionVideo(CamelModel):
    id: str
    title: str
    thumbnail_url: Optional[str] = None
    duration: int
    difficulty: Optional[str] = None
    category: Optional[WorkoutCategorySummary] = None


class WorkoutSessionResponse(CamelModel):
    id: str
    user_id: str
    video_id: Optional[str] = None
    custom_workout_id: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None
    calories_burned: Optional[int] = None
    notes: Optional[str] = None
    video: Optional[SessionVideo] = None


class WorkoutHistory(CamelModel):
    total_workouts: int
    completed_workouts: int
    total_duration: int
    total_calories: int
