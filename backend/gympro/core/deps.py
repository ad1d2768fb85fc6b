"""
Request dependencies: database session, token user, role guards
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.core.security import ACCESS_TOKEN_TYPE, InvalidTokenError, decode_token
from gympro.db.session import SessionLocal
from gympro.schemas.common import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, PageParams

security = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """User context taken from a verified access token"""
    id: str
    email: str
    role: str = "USER"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenUser:
    """
    Usage:
        @router.get("/me")
        async def me(user: TokenUser = Depends(get_current_user)):
            ...
    """
    if not credentials:
        raise _unauthorized("Access token required")

    try:
        payload = decode_token(credentials.credentials, ACCESS_TOKEN_TYPE)
    except InvalidTokenError:
        raise _unauthorized("Invalid or expired access token")

    return TokenUser(id=payload["sub"], email=payload["email"], role=payload.get("role", "USER"))


def require_role(*roles: str):
    """
    Dependency factory: the token role must be one of roles

    Usage:
        @router.delete("/{id}")
        async def delete_thing(user: TokenUser = Depends(require_role("ADMIN"))):
            ...
    """
    allowed = set(roles)

    async def role_checker(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return role_checker


require_admin = require_role("ADMIN")


def get_page_params(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1),
) -> PageParams:
    """Oversized limits are clamped rather than rejected"""
    return PageParams(page=page, limit=min(limit, MAX_LIMIT))
