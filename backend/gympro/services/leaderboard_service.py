"""
Leaderboard scoring and snapshot refresh

Scores:
    WORKOUTS  completed sessions
    CALORIES  calories of completed sessions
    STREAK    longest run of consecutive WORKOUT activity days

Periods count back from now: WEEKLY 7 days, MONTHLY 30 days, ALL_TIME unbounded.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.core.logging_config import get_logger
from gympro.db.session import SessionLocal
from gympro.models.activity import ActivityLog
from gympro.models.leaderboard import CATEGORIES, PERIODS, LeaderboardEntry
from gympro.models.workout import WorkoutSession
from gympro.services.stats import longest_streak

logger = get_logger(__name__)

TOP_N = 50

PERIOD_DAYS = {
    "WEEKLY": 7,
    "MONTHLY": 30,
    "ALL_TIME": None,
}


@dataclass
class Score:
    user_id: str
    score: float


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    days = PERIOD_DAYS[period]
    if days is None:
        return None
    return (now or datetime.utcnow()) - timedelta(days=days)


async def _workout_scores(db: AsyncSession, since: Optional[datetime]) -> List[Score]:
    count = func.count(WorkoutSession.id)
    query = (
        select(WorkoutSession.user_id, count)
        .where(WorkoutSession.completed_at.isnot(None))
        .group_by(WorkoutSession.user_id)
        .order_by(count.desc())
    )
    if since is not None:
        query = query.where(WorkoutSession.completed_at >= since)
    result = await db.execute(query)
    return [Score(user_id, float(total)) for user_id, total in result.all()]


async def _calorie_scores(db: AsyncSession, since: Optional[datetime]) -> List[Score]:
    total = func.sum(WorkoutSession.calories_burned)
    query = (
        select(WorkoutSession.user_id, total)
        .where(
            WorkoutSession.completed_at.isnot(None),
            WorkoutSession.calories_burned.isnot(None),
        )
        .group_by(WorkoutSession.user_id)
        .order_by(total.desc())
    )
    if since is not None:
        query = query.where(WorkoutSession.completed_at >= since)
    result = await db.execute(query)
    return [Score(user_id, float(calories or 0)) for user_id, calories in result.all()]


async def _streak_scores(db: AsyncSession, since: Optional[datetime]) -> List[Score]:
    query = select(ActivityLog.user_id, ActivityLog.date).where(ActivityLog.type == "WORKOUT")
    if since is not None:
        query = query.where(ActivityLog.date >= since.date())
    result = await db.execute(query)

    days_by_user: Dict[str, list] = defaultdict(list)
    for user_id, day in result.all():
        days_by_user[user_id].append(day)

    scores = [Score(user_id, float(longest_streak(days))) for user_id, days in days_by_user.items()]
    scores.sort(key=lambda s: s.score, reverse=True)
    return scores


SCORERS = {
    "WORKOUTS": _workout_scores,
    "CALORIES": _calorie_scores,
    "STREAK": _streak_scores,
}


async def compute_scores(db: AsyncSession, period: str, category: str) -> List[Score]:
    """Every user with a non-zero activity for the period, best first"""
    return await SCORERS[category](db, period_start(period))


def rank_of(scores: List[Score], user_id: str) -> Optional[int]:
    for index, score in enumerate(scores):
        if score.user_id == user_id:
            return index + 1
    return None


async def refresh_snapshot(db: AsyncSession) -> int:
    """
    Recompute every period and category and upsert the top entries

    Users who dropped out of a top list lose their stored row.

    Returns:
        number of entries written
    """
    written = 0
    now = datetime.utcnow()

    for period in PERIODS:
        for category in CATEGORIES:
            top = (await compute_scores(db, period, category))[:TOP_N]
            existing = {
                entry.user_id: entry
                for entry in (await db.execute(
                    select(LeaderboardEntry).where(
                        LeaderboardEntry.period == period,
                        LeaderboardEntry.category == category,
                    )
                )).scalars().all()
            }

            for index, score in enumerate(top):
                entry = existing.pop(score.user_id, None)
                if entry is None:
                    entry = LeaderboardEntry(user_id=score.user_id, period=period, category=category)
                    db.add(entry)
                entry.score = score.score
                entry.rank = index + 1
                entry.updated_at = now
                written += 1

            for stale in existing.values():
                await db.delete(stale)

    await db.commit()
    logger.info(f"🏆 Leaderboard snapshot refreshed: {written} entries")
    return written


async def scheduled_refresh():
    """Scheduler job; runs outside any request so it owns its session"""
    try:
        async with SessionLocal() as db:
            await refresh_snapshot(db)
    except Exception as e:
        logger.error(f"❌ Scheduled leaderboard refresh failed: {e}", exc_info=True)
