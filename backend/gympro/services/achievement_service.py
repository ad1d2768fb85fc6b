"""
Achievement progress

Each criteria type maps to one per-user measurement. Progress is recomputed
from scratch; unlocked_at is stamped only the first time progress reaches the
threshold.
"""

from datetime import datetime
from typing import Awaitable, Callable, Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.core.logging_config import get_logger
from gympro.models.achievement import Achievement, UserAchievement
from gympro.models.community import Post
from gympro.models.custom_workout import CustomWorkout
from gympro.models.workout import WorkoutSession
from gympro.services.stats import latest_streak, scalar_int, workout_days

logger = get_logger(__name__)


async def _workouts_completed(db: AsyncSession, user_id: str) -> int:
    return await scalar_int(db, select(func.count(WorkoutSession.id)).where(
        WorkoutSession.user_id == user_id, WorkoutSession.completed_at.isnot(None)))


async def _calories_burned(db: AsyncSession, user_id: str) -> int:
    return await scalar_int(db, select(func.sum(WorkoutSession.calories_burned)).where(
        WorkoutSession.user_id == user_id, WorkoutSession.completed_at.isnot(None)))


async def _streak(db: AsyncSession, user_id: str) -> int:
    return latest_streak(await workout_days(db, user_id))


async def _posts_created(db: AsyncSession, user_id: str) -> int:
    return await scalar_int(db, select(func.count(Post.id)).where(
        Post.user_id == user_id, Post.is_published.is_(True)))


async def _likes_received(db: AsyncSession, user_id: str) -> int:
    return await scalar_int(db, select(func.sum(Post.likes_count)).where(Post.user_id == user_id))


async def _custom_workouts_created(db: AsyncSession, user_id: str) -> int:
    return await scalar_int(db, select(func.count(CustomWorkout.id)).where(CustomWorkout.user_id == user_id))


CRITERIA: Dict[str, Callable[[AsyncSession, str], Awaitable[int]]] = {
    "workouts_completed": _workouts_completed,
    "calories_burned": _calories_burned,
    "streak": _streak,
    "posts_created": _posts_created,
    "likes_received": _likes_received,
    "custom_workouts_created": _custom_workouts_created,
}


async def recompute_achievements(db: AsyncSession, user_id: str) -> List[str]:
    """
    Refresh every UserAchievement row for user_id and commit

    Returns:
        names of achievements unlocked by this call
    """
    achievements = (await db.execute(select(Achievement))).scalars().all()
    existing = {
        ua.achievement_id: ua
        for ua in (await db.execute(
            select(UserAchievement).where(UserAchievement.user_id == user_id)
        )).scalars().all()
    }

    measured: Dict[str, int] = {}
    newly_unlocked = []
    now = datetime.utcnow()

    for achievement in achievements:
        measure = CRITERIA.get(achievement.criteria_type)
        if measure is None:
            logger.warning(f"Unknown achievement criteria type: {achievement.criteria_type}")
            continue

        if achievement.criteria_type not in measured:
            measured[achievement.criteria_type] = await measure(db, user_id)
        progress = measured[achievement.criteria_type]
        reached = progress >= achievement.threshold

        user_achievement = existing.get(achievement.id)
        if user_achievement is None:
            user_achievement = UserAchievement(user_id=user_id, achievement_id=achievement.id)
            db.add(user_achievement)
        user_achievement.progress = progress
        if reached and user_achievement.unlocked_at is None:
            user_achievement.unlocked_at = now
            newly_unlocked.append(achievement.name)

    await db.commit()
    if newly_unlocked:
        logger.info(f"User {user_id} unlocked: {', '.join(newly_unlocked)}")
    return newly_unlocked


async def refresh_achievements_after(db: AsyncSession, user_id: str) -> None:
    """
    Called once the triggering write is committed; a failure here is logged
    and does not fail the request that triggered it
    """
    try:
        await recompute_achievements(db, user_id)
    except Exception as e:
        await db.rollback()
        logger.error(f"Achievement update failed for user {user_id}: {e}", exc_info=True)
