from datetime import datetime
from typing import Any, Dict, List, Optional

from gympro.schemas.common import CamelModel


class AchievementProgress(CamelModel):
    id: str
    name: str
    description: str
    icon_url: Optional[str] = None
    criteria: Dict[str, Any]
    progress: int
    progress_percent: int
    is_unlocked: bool
    unlocked_at: Optional[datetime] = None


class AchievementList(CamelModel):
    achievements: List[AchievementProgress]
    total_count: int
    unlocked_count: int


class UnlockedAchievement(CamelModel):
    id: str
    name: str
    description: str
    icon_url: Optional[str] = None
    criteria: Dict[str, Any]
    progress: int
    unlocked_at: datetime
