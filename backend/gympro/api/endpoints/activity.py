"""Activity logging: steps, workouts, calories, water"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.core.deps import TokenUser, get_current_user, get_db, get_page_params
from gympro.models.activity import ACTIVITY_TYPES, ActivityLog
from gympro.schemas.activity import ActivityLogCreate, ActivityLogResponse, ActivitySummary, ActivityType
from gympro.schemas.common import ApiResponse, PageParams, PaginatedResponse, ok, paginate
from gympro.services.achievement_service import refresh_achievements_after

router = APIRouter()


def _empty_totals() -> Dict[str, float]:
    return {t: 0 for t in ACTIVITY_TYPES}


def week_start(day: date) -> date:
    """Monday of the week containing day"""
    return day - timedelta(days=day.weekday())


@router.post("/log", response_model=ApiResponse[ActivityLogResponse], status_code=status.HTTP_201_CREATED)
async def log_activity(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    log_in: ActivityLogCreate,
) -> Any:
    activity_date = log_in.date or date.today()
    if isinstance(activity_date, datetime):
        activity_date = activity_date.date()

    log = ActivityLog(
        user_id=user.id,
        type=log_in.type,
        value=log_in.value,
        unit=log_in.unit,
        date=activity_date,
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)
    response = ActivityLogResponse.model_validate(log)

    await refresh_achievements_after(db, user.id)
    return ok(response)


@router.get("/summary", response_model=ApiResponse[ActivitySummary])
async def activity_summary(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
) -> Any:
    """Today's and this week's totals per type, plus per-day totals for the week"""
    today = date.today()
    monday = week_start(today)

    result = await db.execute(
        select(ActivityLog.date, ActivityLog.type, func.sum(ActivityLog.value))
        .where(
            ActivityLog.user_id == user.id,
            ActivityLog.date >= monday,
            ActivityLog.date <= today,
        )
        .group_by(ActivityLog.date, ActivityLog.type)
        .order_by(ActivityLog.date.asc())
    )

    today_totals = _empty_totals()
    weekly_totals = _empty_totals()
    weekly_daily: Dict[str, Dict[str, float]] = {}
    for day, activity_type, total in result.all():
        total = total or 0
        weekly_totals[activity_type] += total
        if day == today:
            today_totals[activity_type] += total
        weekly_daily.setdefault(day.isoformat(), _empty_totals())[activity_type] += total

    return ok({"today": today_totals, "weekly": weekly_totals, "weekly_daily": weekly_daily})


@router.get("/history", response_model=ApiResponse[PaginatedResponse[ActivityLogResponse]])
async def activity_history(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    pagination: PageParams = Depends(get_page_params),
    type: Optional[ActivityType] = Query(None),
) -> Any:
    conditions = [ActivityLog.user_id == user.id]
    if type:
        conditions.append(ActivityLog.type == type)

    total = (await db.execute(select(func.count(ActivityLog.id)).where(and_(*conditions)))).scalar() or 0
    result = await db.execute(
        select(ActivityLog)
        .where(and_(*conditions))
        .order_by(ActivityLog.date.desc(), ActivityLog.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = [ActivityLogResponse.model_validate(log) for log in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))
