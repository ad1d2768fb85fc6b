"""
Async HTTP client for the GymPro API

Handles:
- bearer token attachment from the TokenStore
- one shared token refresh when concurrent requests hit 401
- unwrapping the {"success", "data" | "error"} envelope

Usage:
    async with ApiClient("http://localhost:8000") as client:
        await client.login("me@example.com", "secret123")
        posts = await client.get("/api/posts")
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx

from gympro.client.tokens import TokenStore

logger = logging.getLogger(__name__)

# 401 here means bad credentials, not an expired session
PUBLIC_ENDPOINTS = (
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/forgot-password",
    "/api/auth/reset-password",
)

REFRESH_ENDPOINT = "/api/auth/refresh-token"

SessionExpiredHook = Callable[[], Union[None, Awaitable[None]]]


class ApiError(Exception):
    """Non-2xx response; message is the server's error text"""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class SessionExpiredError(ApiError):
    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(401, message)


class ApiClient:
    def __init__(
        self,
        base_url: str,
        tokens: Optional[TokenStore] = None,
        on_session_expired: Optional[SessionExpiredHook] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.tokens = tokens or TokenStore()
        self.on_session_expired = on_session_expired
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self._refresh_lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _send(self, method: str, endpoint: str, token: Optional[str], **kwargs) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return await self._http.request(method, endpoint, headers=headers, **kwargs)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        """
        Send a request and return the envelope's data

        An explicit token is used as-is and never refreshed.

        Raises:
            SessionExpiredError: the refresh after a 401 failed
            ApiError: any other non-2xx response
        """
        is_public = endpoint.startswith(PUBLIC_ENDPOINTS)
        sent_token = None if is_public else (token or self.tokens.access_token)

        response = await self._send(method, endpoint, sent_token, json=json, params=params)

        if response.status_code == 401 and sent_token and token is None:
            logger.info(f"Access token rejected on {method} {endpoint}, refreshing")
            new_token = await self._refreshed_access_token(sent_token)
            if new_token is None:
                raise SessionExpiredError()
            response = await self._send(method, endpoint, new_token, json=json, params=params)

        return self._unwrap(response)

    async def _refreshed_access_token(self, rejected_token: str) -> Optional[str]:
        # Another caller may already have stored a fresh pair
        current = self.tokens.access_token
        if current and current != rejected_token:
            return current

        async with self._refresh_lock:
            if self._refresh_task is None:
                self._refresh_task = asyncio.ensure_future(self._refresh_session())
            task = self._refresh_task
        try:
            return await task
        finally:
            async with self._refresh_lock:
                if self._refresh_task is task:
                    self._refresh_task = None

    async def _refresh_session(self) -> Optional[str]:
        # Runs once for all waiting callers, so the session expires once
        access_token = await self._refresh_tokens()
        if access_token is None and self.tokens.access_token is not None:
            await self._expire_session()
        return access_token

    async def _refresh_tokens(self) -> Optional[str]:
        refresh_token = self.tokens.refresh_token
        if not refresh_token:
            return None

        try:
            response = await self._send("POST", REFRESH_ENDPOINT, None, json={"refreshToken": refresh_token})
        except httpx.HTTPError as e:
            logger.warning(f"Token refresh request failed: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"Token refresh rejected: {response.status_code}")
            return None

        data = response.json().get("data") or {}
        access_token = data.get("accessToken")
        new_refresh_token = data.get("refreshToken")
        if not access_token or not new_refresh_token:
            return None

        self.tokens.set_tokens(access_token, new_refresh_token)
        return access_token

    async def _expire_session(self):
        self.tokens.clear()
        if self.on_session_expired is None:
            return
        result = self.on_session_expired()
        if inspect.isawaitable(result):
            await result

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            return body.get("data") if isinstance(body, dict) else body

        message = body.get("error") if isinstance(body, dict) else None
        raise ApiError(response.status_code, message or response.reason_phrase)

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> Any:
        return await self.request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs) -> Any:
        return await self.request("PUT", endpoint, **kwargs)

    async def patch(self, endpoint: str, **kwargs) -> Any:
        return await self.request("PATCH", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, **kwargs)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.post("/api/auth/login", json={"email": email, "password": password})
        self.tokens.set_session(data["accessToken"], data["refreshToken"], data["user"])
        return data

    def logout(self):
        self.tokens.clear()
