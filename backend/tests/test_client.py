import asyncio
import json

import httpx
import pytest
from sqlalchemy import update

from gympro.client import AdminSession, ApiClient, ApiError, NotAdminError, SessionExpiredError, TokenStore
from gympro.main import app
from gympro.models.user import User

DEFAULT_PASSWORD = "password123"


def _envelope(data, status_code=200):
    return httpx.Response(status_code, json={"success": True, "data": data})


def _error(message, status_code):
    return httpx.Response(status_code, json={"success": False, "error": message})


class FakeServer:
    """Accepts only the current access token; refresh hands out the next pair"""

    def __init__(self, refresh_ok=True):
        self.refresh_ok = refresh_ok
        self.valid_token = "access-2"
        self.refresh_calls = 0
        self.seen_tokens = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth/refresh-token":
            self.refresh_calls += 1
            # let concurrent callers pile up behind the refresh
            await asyncio.sleep(0.01)
            if not self.refresh_ok:
                return _error("Invalid or expired refresh token", 401)
            assert json.loads(request.content) == {"refreshToken": "refresh-1"}
            return _envelope({"accessToken": "access-2", "refreshToken": "refresh-2"})

        auth = request.headers.get("Authorization")
        self.seen_tokens.append(auth)
        if request.url.path == "/api/auth/login":
            return _error("Invalid email or password", 401)
        if auth != f"Bearer {self.valid_token}":
            return _error("Invalid or expired access token", 401)
        return _envelope({"path": request.url.path})


def _client(server, tokens=None, **kwargs):
    if tokens is None:
        tokens = TokenStore()
        tokens.set_session("access-1", "refresh-1", {"id": "u1", "role": "USER"})
    return ApiClient("http://api.test", tokens=tokens, transport=httpx.MockTransport(server), **kwargs)


async def test_concurrent_401s_share_one_refresh():
    server = FakeServer()
    async with _client(server) as client:
        results = await asyncio.gather(*(client.get(f"/api/things/{i}") for i in range(5)))

        assert results == [{"path": f"/api/things/{i}"} for i in range(5)]
        assert server.refresh_calls == 1
        assert client.tokens.access_token == "access-2"
        assert client.tokens.refresh_token == "refresh-2"


async def test_failed_refresh_expires_session():
    server = FakeServer(refresh_ok=False)
    expired = []

    async def on_expired():
        expired.append(True)

    async with _client(server, on_session_expired=on_expired) as client:
        with pytest.raises(SessionExpiredError) as exc_info:
            await client.get("/api/orders")

        assert exc_info.value.status == 401
        assert expired == [True]
        assert client.tokens.access_token is None
        assert client.tokens.user is None


async def test_concurrent_failed_refresh_expires_session_once():
    server = FakeServer(refresh_ok=False)
    expired = []

    async with _client(server, on_session_expired=lambda: expired.append(True)) as client:
        results = await asyncio.gather(
            *(client.get(f"/api/things/{i}") for i in range(5)), return_exceptions=True,
        )

        assert all(isinstance(r, SessionExpiredError) for r in results)
        assert server.refresh_calls == 1
        assert expired == [True]
        assert client.tokens.access_token is None


async def test_public_endpoints_are_not_refreshed():
    server = FakeServer()
    async with _client(server) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.post("/api/auth/login", json={"email": "a@example.com", "password": "nope"})

        assert exc_info.value.status == 401
        assert exc_info.value.message == "Invalid email or password"
        assert server.refresh_calls == 0
        assert server.seen_tokens == [None]


async def test_explicit_token_is_never_refreshed():
    server = FakeServer()
    async with _client(server) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.get("/api/orders", token="someone-elses-token")

        assert not isinstance(exc_info.value, SessionExpiredError)
        assert server.refresh_calls == 0


def test_token_store_persists_session(tmp_path):
    path = tmp_path / "session.json"
    store = TokenStore(path)
    store.set_session("a", "r", {"id": "u1"})

    reloaded = TokenStore(path)
    assert (reloaded.access_token, reloaded.refresh_token, reloaded.user) == ("a", "r", {"id": "u1"})
    assert reloaded.is_authenticated

    reloaded.clear()
    assert not path.exists()
    store.load()
    assert store.access_token is None


def test_unreadable_token_file_is_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert TokenStore(path).access_token is None


@pytest.fixture
async def live_client(client):
    """ApiClient talking to the app in-process, sharing the test database"""
    api = ApiClient("http://test", transport=httpx.ASGITransport(app=app))
    yield api
    await api.aclose()


async def test_api_error_carries_server_message(live_client, user):
    await live_client.login(user["email"], DEFAULT_PASSWORD)
    with pytest.raises(ApiError) as exc_info:
        await live_client.get("/api/orders/missing")

    assert exc_info.value.status == 404
    assert exc_info.value.message == "Order not found"


async def test_admin_session_accepts_admins(live_client, admin):
    session = AdminSession(live_client)
    user = await session.login(admin["email"], DEFAULT_PASSWORD)
    assert user["role"] == "ADMIN"

    verified = await session.verify()
    assert verified["email"] == admin["email"]


async def test_admin_session_rejects_members(live_client, user):
    session = AdminSession(live_client)
    with pytest.raises(NotAdminError):
        await session.login(user["email"], DEFAULT_PASSWORD)
    assert live_client.tokens.access_token is None

    with pytest.raises(NotAdminError):
        await session.verify()


async def test_admin_session_drops_demoted_admin(live_client, admin, session_factory):
    session = AdminSession(live_client)
    await session.login(admin["email"], DEFAULT_PASSWORD)

    async with session_factory() as db:
        await db.execute(update(User).where(User.id == admin["id"]).values(role="USER"))
        await db.commit()

    # the token still says ADMIN, but /me reports the stored role
    with pytest.raises(NotAdminError):
        await session.verify()
    assert live_client.tokens.access_token is None
