from datetime import datetime
from typing import List, Optional

from pydantic import Field

from gympro.schemas.common import CamelModel


class ExerciseIn(CamelModel):
    exercise_name: str = Field(..., min_length=1, max_length=200)
    sets: int = Field(..., gt=0)
    reps: Optional[int] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)
    rest_seconds: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=500)


class CustomWorkoutCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    is_public: bool = False
    exercises: List[ExerciseIn] = Field(..., min_length=1)


class CustomWorkoutUpdate(CamelModel):
    """exercises, when given, replace the whole list"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    is_public: Optional[bool] = None
    exercises: Optional[List[ExerciseIn]] = Field(None, min_length=1)


class ExerciseResponse(CamelModel):
    id: str
    exercise_name: str
    sets: int
    reps: Optional[int] = None
    weight: Optional[float] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None
    sort_order: int


class CustomWorkoutSummary(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    is_public: bool
    exercise_count: int = 0
    created_at: datetime
    updated_at: datetime


class CustomWorkoutResponse(CamelModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    is_public: bool
    exercises: List[ExerciseResponse] = []
    created_at: datetime
    updated_at: datetime
