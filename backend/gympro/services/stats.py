"""
Per-user workout statistics shared by achievements and the leaderboard
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.models.activity import ActivityLog


def _unique_days(days: Iterable[date]) -> List[date]:
    return sorted(set(days))


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days"""
    ordered = _unique_days(days)
    if not ordered:
        return 0
    best = run = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if curr - prev == timedelta(days=1):
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def latest_streak(days: Iterable[date]) -> int:
    """Run of consecutive days ending at the most recent day"""
    ordered = _unique_days(days)
    if not ordered:
        return 0
    streak = 1
    for i in range(len(ordered) - 1, 0, -1):
        if ordered[i] - ordered[i - 1] == timedelta(days=1):
            streak += 1
        else:
            break
    return streak


async def workout_days(db: AsyncSession, user_id: str, since: Optional[datetime] = None) -> List[date]:
    query = select(ActivityLog.date).where(
        ActivityLog.user_id == user_id,
        ActivityLog.type == "WORKOUT",
    )
    if since is not None:
        query = query.where(ActivityLog.date >= since.date())
    result = await db.execute(query.distinct())
    return list(result.scalars().all())


async def scalar_int(db: AsyncSession, query) -> int:
    value = (await db.execute(query)).scalar()
    return int(value or 0)
