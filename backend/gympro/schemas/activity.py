from datetime import date as date_type, datetime
from typing import Dict, Literal, Optional, Union

from pydantic import Field

from gympro.schemas.common import CamelModel

ActivityType = Literal["STEPS", "WORKOUT", "CALORIES_BURNED", "WATER"]


class ActivityLogCreate(CamelModel):
    type: ActivityType
    value: float = Field(..., gt=0)
    unit: Optional[str] = Field(None, max_length=50)
    # Any time component is dropped; defaults to today
    date: Optional[Union[datetime, date_type]] = None


class ActivityLogResponse(CamelModel):
    id: str
    user_id: str
    type: str
    value: float
    unit: Optional[str] = None
    date: date_type
    created_at: datetime


class ActivitySummary(CamelModel):
    today: Dict[str, float]
    weekly: Dict[str, float]
    weekly_daily: Dict[str, Dict[str, float]]
