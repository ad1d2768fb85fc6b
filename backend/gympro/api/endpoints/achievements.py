from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db
from gympro.models.achievement import Achievement, UserAchievement
from gympro.schemas.achievement import AchievementList, AchievementProgress, UnlockedAchievement
from gympro.schemas.common import ApiResponse, ok

router = APIRouter()


def progress_percent(progress: int, threshold: int) -> int:
    if threshold <= 0:
        return 100
    return min(100, round(progress / threshold * 100))


@router.get("", response_model=ApiResponse[AchievementList])
async def list_achievements(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
) -> Any:
    """Every achievement with the caller's progress; unlocked first, then closest to unlocking"""
    achievements = (await db.execute(
        select(Achievement).order_by(Achievement.created_at.asc())
    )).scalars().all()
    mine = {
        ua.achievement_id: ua
        for ua in (await db.execute(
            select(UserAchievement).where(UserAchievement.user_id == user.id)
        )).scalars().all()
    }

    items: List[AchievementProgress] = []
    for achievement in achievements:
        user_achievement = mine.get(achievement.id)
        progress = user_achievement.progress if user_achievement else 0
        unlocked_at = user_achievement.unlocked_at if user_achievement else None
        items.append(AchievementProgress(
            id=achievement.id,
            name=achievement.name,
            description=achievement.description,
            icon_url=achievement.icon_url,
            criteria=achievement.criteria,
            progress=progress,
            progress_percent=progress_percent(progress, achievement.threshold),
            is_unlocked=unlocked_at is not None,
            unlocked_at=unlocked_at,
        ))

    items.sort(key=lambda a: (not a.is_unlocked, -a.progress_percent))
    unlocked_count = sum(1 for a in items if a.is_unlocked)
    return ok({"achievements": items, "total_count": len(items), "unlocked_count": unlocked_count})


@router.get("/mine", response_model=ApiResponse[List[UnlockedAchievement]])
async def list_my_achievements(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
) -> Any:
    result = await db.execute(
        select(UserAchievement)
        .options(selectinload(UserAchievement.achievement))
        .where(UserAchievement.user_id == user.id, UserAchievement.unlocked_at.isnot(None))
        .order_by(UserAchievement.unlocked_at.desc())
    )
    items = [
        UnlockedAchievement(
            id=ua.achievement.id,
            name=ua.achievement.name,
            description=ua.achievement.description,
            icon_url=ua.achievement.icon_url,
            criteria=ua.achievement.criteria,
            progress=ua.progress,
            unlocked_at=ua.unlocked_at,
        )
        for ua in result.scalars().all()
    ]
    return ok(items)
