"""User administration (ADMIN only, enforced at router level)"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.core.deps import TokenUser, get_db, get_page_params, require_admin
from gympro.core.logging_config import get_logger
from gympro.models.community import Post
from gympro.models.custom_workout import CustomWorkout
from gympro.models.order import Order
from gympro.models.user import User
from gympro.models.workout import WorkoutSession
from gympro.schemas.admin import AdminUserDetail, AdminUserResponse, RoleUpdate, StatusUpdate, UserActivityCounts
from gympro.schemas.common import ApiResponse, PageParams, PaginatedResponse, ok, paginate

router = APIRouter(dependencies=[Depends(require_admin)])
logger = get_logger(__name__)

SORT_FIELDS = {
    "createdAt": User.created_at,
    "email": User.email,
    "firstName": User.first_name,
    "lastName": User.last_name,
    "role": User.role,
}


async def _get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users", response_model=ApiResponse[PaginatedResponse[AdminUserResponse]])
async def list_users(
    *,
    db: AsyncSession = Depends(get_db),
    pagination: PageParams = Depends(get_page_params),
    filter: str = Query("all"),
    search: Optional[str] = Query(None),
    sort: str = Query("createdAt"),
    order: str = Query("desc"),
) -> Any:
    conditions = []
    if filter == "active":
        conditions.append(User.is_active.is_(True))
    elif filter == "inactive":
        conditions.append(User.is_active.is_(False))
    elif filter == "admin":
        conditions.append(User.role == "ADMIN")
    elif filter == "trainer":
        conditions.append(User.role == "TRAINER")
    elif filter == "premium":
        conditions.append(User.subscription_status == "PREMIUM")

    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern),
        ))

    sort_column = SORT_FIELDS.get(sort, User.created_at)
    ordering = sort_column.asc() if order == "asc" else sort_column.desc()

    query = select(User)
    count_query = select(func.count(User.id))
    if conditions:
        query = query.where(and_(*conditions))
        count_query = count_query.where(and_(*conditions))

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(query.order_by(ordering).offset(pagination.offset).limit(pagination.limit))
    users = [AdminUserResponse.model_validate(u) for u in result.scalars().all()]
    return ok(paginate(users, total, pagination.page, pagination.limit))


@router.get("/users/{user_id}", response_model=ApiResponse[AdminUserDetail])
async def get_user(*, db: AsyncSession = Depends(get_db), user_id: str) -> Any:
    user = await _get_user(db, user_id)

    async def count(model) -> int:
        return (await db.execute(select(func.count(model.id)).where(model.user_id == user_id))).scalar() or 0

    counts = UserActivityCounts(
        workout_sessions=await count(WorkoutSession),
        custom_workouts=await count(CustomWorkout),
        posts=await count(Post),
        orders=await count(Order),
    )
    detail = AdminUserDetail.model_validate({**AdminUserResponse.model_validate(user).model_dump(), "counts": counts})
    return ok(detail)


@router.patch("/users/{user_id}/role", response_model=ApiResponse[AdminUserResponse])
async def update_user_role(
    *,
    db: AsyncSession = Depends(get_db),
    admin: TokenUser = Depends(require_admin),
    user_id: str,
    body: RoleUpdate,
) -> Any:
    if admin.id == user_id:
        raise HTTPException(status_code=400, detail="Cannot change your own role")

    user = await _get_user(db, user_id)
    user.role = body.role
    await db.commit()
    await db.refresh(user)

    logger.info(f"{admin.email} set role of {user.email} to {body.role}")
    return ok(AdminUserResponse.model_validate(user))


@router.patch("/users/{user_id}/status", response_model=ApiResponse[AdminUserResponse])
async def update_user_status(
    *,
    db: AsyncSession = Depends(get_db),
    admin: TokenUser = Depends(require_admin),
    user_id: str,
    body: StatusUpdate,
) -> Any:
    if admin.id == user_id and not body.is_active:
        raise HTTPException(status_code=400, detail="Cannot deactivate your own account")

    user = await _get_user(db, user_id)
    user.is_active = body.is_active
    await db.commit()
    await db.refresh(user)

    logger.info(f"{admin.email} set {user.email} active={body.is_active}")
    return ok(AdminUserResponse.model_validate(user))
