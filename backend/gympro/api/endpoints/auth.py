"""
Authentication API

Credential endpoints share the per-IP auth rate limit.
"""

import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db, require_admin
from gympro.core.logging_config import get_logger
from gympro.core.rate_limit import auth_rate_limit
from gympro.core.security import (
    REFRESH_TOKEN_TYPE, InvalidTokenError, create_token_pair, decode_token, hash_password, verify_password,
)
from gympro.models.community import Post
from gympro.models.product import Product
from gympro.models.user import User, UserProfile
from gympro.models.workout import WorkoutSession
from gympro.schemas.auth import (
    AdminStats, AuthResponse, ChangePasswordRequest, ForgotPasswordRequest, LoginRequest,
    ProfileUpdate, RefreshTokenRequest, RegisterRequest, ResetPasswordRequest, TokenPair, UserResponse,
)
from gympro.schemas.common import ApiResponse, MessageResponse, ok

router = APIRouter()
logger = get_logger(__name__)

USER_FIELDS = ("first_name", "last_name", "avatar_url", "phone")
PROFILE_FIELDS = ("bio", "date_of_birth", "gender", "height", "weight", "fitness_goal", "experience_level")


async def get_user_with_profile(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(
        select(User)
        .options(selectinload(User.profile))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _auth_payload(user: User) -> dict:
    tokens = create_token_pair(user.id, user.email, user.role)
    return {"user": UserResponse.model_validate(user), **tokens}


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)],
)
async def register(*, db: AsyncSession = Depends(get_db), user_in: RegisterRequest) -> Any:
    email = user_in.email.lower()
    if await db.scalar(select(User.id).where(User.email == email)):
        raise HTTPException(status_code=409, detail="An account with this email already exists")

    user = User(
        email=email,
        password_hash=hash_password(user_in.password),
        first_name=user_in.first_name,
        last_name=user_in.last_name,
    )
    user.profile = UserProfile()
    db.add(user)
    await db.commit()

    logger.info(f"New user registered: {email}")
    user = await get_user_with_profile(db, user.id)
    return ok(_auth_payload(user))


@router.post("/login", response_model=ApiResponse[AuthResponse], dependencies=[Depends(auth_rate_limit)])
async def login(*, db: AsyncSession = Depends(get_db), credentials: LoginRequest) -> Any:
    result = await db.execute(
        select(User).options(selectinload(User.profile)).where(User.email == credentials.email.lower())
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated. Contact support.")
    if not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return ok(_auth_payload(user))


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
async def refresh_token(*, db: AsyncSession = Depends(get_db), body: RefreshTokenRequest) -> Any:
    if not body.refresh_token:
        raise HTTPException(status_code=400, detail="Refresh token is required")

    try:
        payload = decode_token(body.refresh_token, REFRESH_TOKEN_TYPE)
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")

    user = await db.get(User, payload["sub"])
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or deactivated")

    return ok(create_token_pair(user.id, user.email, user.role))


@router.get("/me", response_model=ApiResponse[UserResponse])
async def read_me(
    *,
    db: AsyncSession = Depends(get_db),
    current: TokenUser = Depends(get_current_user),
) -> Any:
    user = await get_user_with_profile(db, current.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return ok(UserResponse.model_validate(user))


@router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    *,
    db: AsyncSession = Depends(get_db),
    current: TokenUser = Depends(get_current_user),
    profile_in: ProfileUpdate,
) -> Any:
    user = await get_user_with_profile(db, current.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    update_data = profile_in.model_dump(exclude_unset=True)
    for field in USER_FIELDS:
        if field in update_data:
            if field in ("first_name", "last_name") and update_data[field] is None:
                continue
            setattr(user, field, update_data[field])

    profile_data = {k: v for k, v in update_data.items() if k in PROFILE_FIELDS}
    if profile_data:
        if user.profile is None:
            user.profile = UserProfile()
        for field, value in profile_data.items():
            setattr(user.profile, field, value)

    await db.commit()
    user = await get_user_with_profile(db, current.id)
    return ok(UserResponse.model_validate(user))


@router.put("/change-password", response_model=ApiResponse[MessageResponse])
async def change_password(
    *,
    db: AsyncSession = Depends(get_db),
    current: TokenUser = Depends(get_current_user),
    body: ChangePasswordRequest,
) -> Any:
    user = await db.get(User, current.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = hash_password(body.new_password)
    await db.commit()
    logger.info(f"Password changed for {user.email}")
    return ok({"message": "Password changed successfully"})


@router.post(
    "/forgot-password",
    response_model=ApiResponse[MessageResponse],
    dependencies=[Depends(auth_rate_limit)],
)
async def forgot_password(*, db: AsyncSession = Depends(get_db), body: ForgotPasswordRequest) -> Any:
    """Same answer whether or not the account exists"""
    email = body.email.lower()
    if await db.scalar(select(User.id).where(User.email == email)):
        # No mail delivery yet; the token only goes to the log
        reset_token = secrets.token_hex(32)
        logger.info(f"[DEV] Password reset token for {email}: {reset_token}")

    return ok({"message": "If an account exists with this email, a reset link has been sent."})


@router.post("/reset-password", response_model=ApiResponse[MessageResponse])
async def reset_password(*, body: ResetPasswordRequest) -> Any:
    # TODO: look the reset token up once forgot-password persists it
    if not body.token:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    password_hash = hash_password(body.password)
    logger.info(f"[DEV] Password would be reset with hash: {password_hash[:20]}...")
    return ok({"message": "Password has been reset successfully."})


@router.get("/admin/stats", response_model=ApiResponse[AdminStats])
async def admin_stats(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
) -> Any:
    one_week_ago = datetime.utcnow() - timedelta(days=7)

    async def count(query) -> int:
        return (await db.execute(query)).scalar() or 0

    return ok({
        "total_users": await count(select(func.count(User.id))),
        "active_users": await count(select(func.count(User.id)).where(User.is_active.is_(True))),
        "new_users_this_week": await count(select(func.count(User.id)).where(User.created_at >= one_week_ago)),
        "total_posts": await count(select(func.count(Post.id))),
        "total_workout_sessions": await count(select(func.count(WorkoutSession.id))),
        "total_products": await count(select(func.count(Product.id))),
    })
