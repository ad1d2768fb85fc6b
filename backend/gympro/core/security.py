"""
Password hashing and JWT helpers

Access and refresh tokens are signed with different secrets and carry a
``type`` claim; decoding checks both, so one kind can never stand in for the other.
"""

from datetime import datetime, timedelta
from typing import Any, Dict

from jose import jwt, JWTError
from passlib.context import CryptContext

from gympro.core.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class InvalidTokenError(Exception):
    """Token is malformed, expired, or of the wrong type"""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def _secret_for(token_type: str) -> str:
    return settings.REFRESH_SECRET_KEY if token_type == REFRESH_TOKEN_TYPE else settings.SECRET_KEY


def _create_token(user_id: str, email: str, role: str, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.ALGORITHM)


def create_access_token(user_id: str, email: str, role: str) -> str:
    return _create_token(
        user_id, email, role, ACCESS_TOKEN_TYPE,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str, email: str, role: str) -> str:
    return _create_token(
        user_id, email, role, REFRESH_TOKEN_TYPE,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def create_token_pair(user_id: str, email: str, role: str) -> Dict[str, str]:
    return {
        "access_token": create_access_token(user_id, email, role),
        "refresh_token": create_refresh_token(user_id, email, role),
    }


def decode_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Verify signature, expiry and token type

    Raises:
        InvalidTokenError: on any failure
    """
    try:
        payload = jwt.decode(token, _secret_for(token_type), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    if payload.get("type") != token_type:
        raise InvalidTokenError(f"Expected a {token_type} token")
    if not payload.get("sub") or not payload.get("email"):
        raise InvalidTokenError("Token payload is missing user id or email")
    return payload
