"""
Workout catalog API: categories, videos, and the caller's workout sessions
"""

import re
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db, get_page_params, require_admin
from gympro.core.logging_config import get_logger
from gympro.models.custom_workout import CustomWorkout
from gympro.models.workout import WorkoutCategory, WorkoutSession, WorkoutVideo
from gympro.schemas.common import ApiResponse, MessageResponse, PageParams, PaginatedResponse, ok, paginate
from gympro.schemas.workout import (
    Difficulty, SessionComplete, SessionCreate, WorkoutCategoryCreate, WorkoutCategoryDetail,
    WorkoutCategoryResponse, WorkoutCategoryUpdate, WorkoutHistory, WorkoutSessionResponse,
    WorkoutVideoCreate, WorkoutVideoResponse, WorkoutVideoSummary, WorkoutVideoUpdate,
)
from gympro.services.achievement_service import refresh_achievements_after

router = APIRouter()
logger = get_logger(__name__)


def slugify(text: str) -> str:
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    return re.sub(r"-+", "-", text)


async def _get_video(db: AsyncSession, video_id: str) -> Optional[WorkoutVideo]:
    result = await db.execute(
        select(WorkoutVideo)
        .options(selectinload(WorkoutVideo.category))
        .where(WorkoutVideo.id == video_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_session(db: AsyncSession, session_id: str) -> Optional[WorkoutSession]:
    result = await db.execute(
        select(WorkoutSession)
        .options(selectinload(WorkoutSession.video).selectinload(WorkoutVideo.category))
        .where(WorkoutSession.id == session_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _ensure_category(db: AsyncSession, category_id: str):
    if not await db.get(WorkoutCategory, category_id):
        raise HTTPException(status_code=404, detail="Category not found")


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@router.get("/categories", response_model=ApiResponse[List[WorkoutCategoryResponse]])
async def list_categories(*, db: AsyncSession = Depends(get_db)) -> Any:
    """Categories with their published video counts"""
    count_subq = (
        select(WorkoutVideo.category_id, func.count(WorkoutVideo.id).label("cnt"))
        .where(WorkoutVideo.is_published.is_(True))
        .group_by(WorkoutVideo.category_id)
        .subquery()
    )
    result = await db.execute(
        select(WorkoutCategory, func.coalesce(count_subq.c.cnt, 0))
        .outerjoin(count_subq, count_subq.c.category_id == WorkoutCategory.id)
        .order_by(WorkoutCategory.sort_order.asc())
    )
    data = []
    for cat, cnt in result.all():
        item = WorkoutCategoryResponse.model_validate(cat)
        item.video_count = cnt
        data.append(item)
    return ok(data)


@router.get("/categories/{slug}", response_model=ApiResponse[WorkoutCategoryDetail])
async def get_category_by_slug(*, db: AsyncSession = Depends(get_db), slug: str) -> Any:
    category = (await db.execute(
        select(WorkoutCategory).where(WorkoutCategory.slug == slug)
    )).scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    videos = (await db.execute(
        select(WorkoutVideo)
        .where(WorkoutVideo.category_id == category.id, WorkoutVideo.is_published.is_(True))
        .order_by(WorkoutVideo.created_at.desc())
    )).scalars().all()

    detail = WorkoutCategoryDetail(
        **WorkoutCategoryResponse.model_validate(category).model_dump(),
        videos=[WorkoutVideoSummary.model_validate(v) for v in videos],
    )
    detail.video_count = len(videos)
    return ok(detail)


@router.post("/categories", response_model=ApiResponse[WorkoutCategoryResponse], status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    category_in: WorkoutCategoryCreate,
) -> Any:
    slug = slugify(category_in.name)
    if await db.scalar(select(WorkoutCategory.id).where(WorkoutCategory.slug == slug)):
        raise HTTPException(status_code=409, detail="A category with this name already exists")

    # New categories go to the end
    max_sort = await db.scalar(select(func.max(WorkoutCategory.sort_order)))
    sort_order = (max_sort if max_sort is not None else -1) + 1

    category = WorkoutCategory(**category_in.model_dump(), slug=slug, sort_order=sort_order)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return ok(WorkoutCategoryResponse.model_validate(category))


@router.put("/categories/{category_id}", response_model=ApiResponse[WorkoutCategoryResponse])
async def update_category(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    category_id: str,
    category_in: WorkoutCategoryUpdate,
) -> Any:
    category = await db.get(WorkoutCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    update_data = category_in.model_dump(exclude_unset=True)
    if update_data.get("name"):
        slug = slugify(update_data["name"])
        duplicate = await db.scalar(
            select(WorkoutCategory.id).where(WorkoutCategory.slug == slug, WorkoutCategory.id != category_id)
        )
        if duplicate:
            raise HTTPException(status_code=409, detail="A category with this name already exists")
        update_data["slug"] = slug
    elif "name" in update_data:
        update_data.pop("name")

    for field, value in update_data.items():
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)
    return ok(WorkoutCategoryResponse.model_validate(category))


@router.delete("/categories/{category_id}", response_model=ApiResponse[MessageResponse])
async def delete_category(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    category_id: str,
) -> Any:
    category = await db.get(WorkoutCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    video_count = await db.scalar(
        select(func.count(WorkoutVideo.id)).where(WorkoutVideo.category_id == category_id)
    ) or 0
    if video_count > 0:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete category with {video_count} associated video(s). Remove videos first.",
        )

    await db.delete(category)
    await db.commit()
    return ok({"message": "Category deleted successfully"})


# ---------------------------------------------------------------------------
# Videos
# ---------------------------------------------------------------------------

@router.get("/videos", response_model=ApiResponse[PaginatedResponse[WorkoutVideoResponse]])
async def list_videos(
    *,
    db: AsyncSession = Depends(get_db),
    pagination: PageParams = Depends(get_page_params),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    difficulty: Optional[Difficulty] = Query(None),
    is_premium: Optional[bool] = Query(None, alias="isPremium"),
    search: Optional[str] = Query(None, max_length=200),
) -> Any:
    """Published videos, newest first"""
    conditions = [WorkoutVideo.is_published.is_(True)]
    if category_id:
        conditions.append(WorkoutVideo.category_id == category_id)
    if difficulty:
        conditions.append(WorkoutVideo.difficulty == difficulty)
    if is_premium is not None:
        conditions.append(WorkoutVideo.is_premium.is_(is_premium))
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(WorkoutVideo.title.ilike(pattern), WorkoutVideo.description.ilike(pattern)))

    total = (await db.execute(select(func.count(WorkoutVideo.id)).where(and_(*conditions)))).scalar() or 0
    result = await db.execute(
        select(WorkoutVideo)
        .options(selectinload(WorkoutVideo.category))
        .where(and_(*conditions))
        .order_by(WorkoutVideo.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = [WorkoutVideoResponse.model_validate(v) for v in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.get("/videos/{video_id}", response_model=ApiResponse[WorkoutVideoResponse])
async def get_video(*, db: AsyncSession = Depends(get_db), video_id: str) -> Any:
    """Each fetch counts as a view"""
    video = await _get_video(db, video_id)
    if not video or not video.is_published:
        raise HTTPException(status_code=404, detail="Video not found")

    response = WorkoutVideoResponse.model_validate(video)
    await db.execute(
        update(WorkoutVideo)
        .where(WorkoutVideo.id == video_id)
        .values(view_count=WorkoutVideo.view_count + 1)
    )
    await db.commit()
    return ok(response)


@router.get("/videos/{video_id}/related", response_model=ApiResponse[List[WorkoutVideoSummary]])
async def get_related_videos(*, db: AsyncSession = Depends(get_db), video_id: str) -> Any:
    """Up to 6 most viewed published videos from the same category"""
    video = await db.get(WorkoutVideo, video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")

    result = await db.execute(
        select(WorkoutVideo)
        .where(
            WorkoutVideo.category_id == video.category_id,
            WorkoutVideo.id != video_id,
            WorkoutVideo.is_published.is_(True),
        )
        .order_by(WorkoutVideo.view_count.desc())
        .limit(6)
    )
    return ok([WorkoutVideoSummary.model_validate(v) for v in result.scalars().all()])


@router.post("/videos", response_model=ApiResponse[WorkoutVideoResponse], status_code=status.HTTP_201_CREATED)
async def create_video(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(require_admin),
    video_in: WorkoutVideoCreate,
) -> Any:
    await _ensure_category(db, video_in.category_id)

    video = WorkoutVideo(**video_in.model_dump(), is_published=True)
    db.add(video)
    await db.commit()

    logger.info(f"Workout video '{video.title}' created by {user.email}")
    return ok(WorkoutVideoResponse.model_validate(await _get_video(db, video.id)))


@router.put("/videos/{video_id}", response_model=ApiResponse[WorkoutVideoResponse])
async def update_video(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    video_id: str,
    video_in: WorkoutVideoUpdate,
) -> Any:
    video = await db.get(WorkoutVideo, video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")

    update_data = video_in.model_dump(exclude_unset=True)
    if update_data.get("category_id"):
        await _ensure_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(video, field, value)

    await db.commit()
    return ok(WorkoutVideoResponse.model_validate(await _get_video(db, video_id)))


@router.delete("/videos/{video_id}", response_model=ApiResponse[MessageResponse])
async def delete_video(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    video_id: str,
) -> Any:
    video = await db.get(WorkoutVideo, video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")

    await db.delete(video)
    await db.commit()
    return ok({"message": "Video deleted successfully"})


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@router.post("/sessions", response_model=ApiResponse[WorkoutSessionResponse], status_code=status.HTTP_201_CREATED)
async def start_session(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    session_in: SessionCreate,
) -> Any:
    if session_in.video_id and not await db.get(WorkoutVideo, session_in.video_id):
        raise HTTPException(status_code=404, detail="Video not found")

    if session_in.custom_workout_id:
        custom_workout = await db.get(CustomWorkout, session_in.custom_workout_id)
        if not custom_workout or (custom_workout.user_id != user.id and not custom_workout.is_public):
            raise HTTPException(status_code=404, detail="Custom workout not found")

    session = WorkoutSession(user_id=user.id, **session_in.model_dump())
    db.add(session)
    await db.commit()
    return ok(WorkoutSessionResponse.model_validate(await _get_session(db, session.id)))


@router.patch("/sessions/{session_id}/complete", response_model=ApiResponse[WorkoutSessionResponse])
async def complete_session(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    session_id: str,
    body: Optional[SessionComplete] = None,
) -> Any:
    session = await db.get(WorkoutSession, session_id)
    if not session or session.user_id != user.id:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.completed_at is not None:
        raise HTTPException(status_code=400, detail="Session already completed")

    session.completed_at = datetime.utcnow()
    if body is not None:
        if body.duration is not None:
            session.duration = body.duration
        if body.calories_burned is not None:
            session.calories_burned = body.calories_burned
    await db.commit()

    await refresh_achievements_after(db, user.id)
    return ok(WorkoutSessionResponse.model_validate(await _get_session(db, session_id)))


@router.get("/sessions", response_model=ApiResponse[PaginatedResponse[WorkoutSessionResponse]])
async def list_my_sessions(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    pagination: PageParams = Depends(get_page_params),
) -> Any:
    total = (await db.execute(
        select(func.count(WorkoutSession.id)).where(WorkoutSession.user_id == user.id)
    )).scalar() or 0
    result = await db.execute(
        select(WorkoutSession)
        .options(selectinload(WorkoutSession.video).selectinload(WorkoutVideo.category))
        .where(WorkoutSession.user_id == user.id)
        .order_by(WorkoutSession.started_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = [WorkoutSessionResponse.model_validate(s) for s in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.get("/history", response_model=ApiResponse[WorkoutHistory])
async def workout_history(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
) -> Any:
    row = (await db.execute(
        select(
            func.count(WorkoutSession.id),
            func.count(WorkoutSession.completed_at),
            func.coalesce(func.sum(WorkoutSession.duration), 0),
            func.coalesce(func.sum(WorkoutSession.calories_burned), 0),
        ).where(WorkoutSession.user_id == user.id)
    )).one()
    return ok({
        "total_workouts": row[0],
        "completed_workouts": row[1],
        "total_duration": row[2],
        "total_calories": row[3],
    })
