from datetime import datetime, timedelta

import pytest
from jose import jwt
from sqlalchemy import update

from gympro.core.config import settings
from gympro.core.errors import format_validation_errors
from gympro.core.rate_limit import rate_limiter
from gympro.core.security import (
    ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, InvalidTokenError, create_token_pair, decode_token,
)
from gympro.models.user import User

DEFAULT_PASSWORD = "password123"


async def test_register_returns_user_and_token_pair(client):
    resp = await client.post("/api/auth/register", json={
        "email": "New@Example.com",
        "password": "password123",
        "firstName": "Nia",
        "lastName": "Runner",
    })

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "USER"
    assert data["accessToken"] and data["refreshToken"]

    payload = decode_token(data["accessToken"], ACCESS_TOKEN_TYPE)
    assert payload["sub"] == data["user"]["id"]
    assert payload["email"] == "new@example.com"


async def test_register_duplicate_email_conflicts(client, user):
    resp = await client.post("/api/auth/register", json={
        "email": user["email"],
        "password": "password123",
        "firstName": "Dup",
        "lastName": "User",
    })
    assert resp.status_code == 409


async def test_register_validation_message(client):
    resp = await client.post("/api/auth/register", json={
        "email": "not-an-email",
        "password": "short",
        "firstName": "A",
        "lastName": "B",
    })
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert "email:" in error
    assert "password:" in error


def test_format_validation_errors_drops_location_prefix():
    errors = [
        {"loc": ("body", "items", 0, "quantity"), "msg": "Input should be greater than 0"},
        {"loc": ("query", "limit"), "msg": "Input should be a valid integer"},
        {"loc": ("body",), "msg": "Field required"},
    ]
    assert format_validation_errors(errors) == (
        "items.0.quantity: Input should be greater than 0, "
        "limit: Input should be a valid integer, "
        "Field required"
    )


async def test_login_wrong_password(client, user):
    resp = await client.post("/api/auth/login", json={"email": user["email"], "password": "wrong-password"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid email or password"


async def test_login_deactivated_account(client, user, session_factory):
    async with session_factory() as session:
        await session.execute(update(User).where(User.id == user["id"]).values(is_active=False))
        await session.commit()

    resp = await client.post("/api/auth/login", json={"email": user["email"], "password": DEFAULT_PASSWORD})
    assert resp.status_code == 403


async def test_refresh_issues_new_pair(client, user):
    resp = await client.post("/api/auth/refresh-token", json={"refreshToken": user["tokens"]["refreshToken"]})
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert decode_token(data["refreshToken"], REFRESH_TOKEN_TYPE)["sub"] == user["id"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == user["id"]


async def test_refresh_requires_token(client):
    resp = await client.post("/api/auth/refresh-token", json={})
    assert resp.status_code == 400


async def test_access_token_is_not_a_refresh_token(client, user):
    resp = await client.post("/api/auth/refresh-token", json={"refreshToken": user["tokens"]["accessToken"]})
    assert resp.status_code == 401


async def test_refresh_token_is_not_an_access_token(client, user):
    resp = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {user['tokens']['refreshToken']}"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


async def test_refresh_rejected_for_deactivated_user(client, user, session_factory):
    async with session_factory() as session:
        await session.execute(update(User).where(User.id == user["id"]).values(is_active=False))
        await session.commit()

    resp = await client.post("/api/auth/refresh-token", json={"refreshToken": user["tokens"]["refreshToken"]})
    assert resp.status_code == 401


def test_expired_access_token_is_rejected():
    expired = jwt.encode(
        {
            "sub": "user-1",
            "email": "a@example.com",
            "role": "USER",
            "type": ACCESS_TOKEN_TYPE,
            "exp": datetime.utcnow() - timedelta(minutes=1),
        },
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    with pytest.raises(InvalidTokenError):
        decode_token(expired, ACCESS_TOKEN_TYPE)


def test_token_pair_uses_distinct_secrets():
    pair = create_token_pair("user-1", "a@example.com", "USER")
    with pytest.raises(InvalidTokenError):
        decode_token(pair["access_token"], REFRESH_TOKEN_TYPE)
    with pytest.raises(InvalidTokenError):
        decode_token(pair["refresh_token"], ACCESS_TOKEN_TYPE)


async def test_update_profile_and_change_password(client, user):
    resp = await client.put("/api/auth/profile", headers=user["headers"], json={
        "firstName": "Renamed",
        "bio": "Morning runner",
    })
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["firstName"] == "Renamed"
    assert data["profile"]["bio"] == "Morning runner"

    resp = await client.put("/api/auth/change-password", headers=user["headers"], json={
        "currentPassword": "nope-nope",
        "newPassword": "newpassword123",
    })
    assert resp.status_code == 400

    resp = await client.put("/api/auth/change-password", headers=user["headers"], json={
        "currentPassword": DEFAULT_PASSWORD,
        "newPassword": "newpassword123",
    })
    assert resp.status_code == 200

    resp = await client.post("/api/auth/login", json={"email": user["email"], "password": "newpassword123"})
    assert resp.status_code == 200


async def test_forgot_password_does_not_reveal_accounts(client, user):
    known = await client.post("/api/auth/forgot-password", json={"email": user["email"]})
    unknown = await client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


async def test_credential_endpoints_are_rate_limited(client, user, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_RATE_LIMIT", 3)
    # registering the fixture user already used one slot
    rate_limiter.reset()

    statuses = []
    for _ in range(4):
        resp = await client.post("/api/auth/login", json={"email": user["email"], "password": "wrong-password"})
        statuses.append(resp.status_code)

    assert statuses == [401, 401, 401, 429]
    assert resp.json()["error"] == "Too many attempts. Please try again later."
    assert "retry-after" in resp.headers
