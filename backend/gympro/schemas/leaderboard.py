from typing import Dict, List, Literal, Optional

from gympro.schemas.common import CamelModel

Period = Literal["WEEKLY", "MONTHLY", "ALL_TIME"]
Category = Literal["WORKOUTS", "CALORIES", "STREAK"]


class LeaderboardRow(CamelModel):
    rank: int
    score: float
    user_id: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None
    is_current_user: bool = False


class LeaderboardResponse(CamelModel):
    entries: List[LeaderboardRow]
    # Only set when the caller is not already in entries
    my_rank: Optional[LeaderboardRow] = None
    period: Period
    category: Category


class RankScore(CamelModel):
    """rank 0 means no score yet"""
    rank: int
    score: float


# period -> category -> rank
MyRankResponse = Dict[str, Dict[str, RankScore]]


class RefreshResult(CamelModel):
    message: str
    total_entries: int
