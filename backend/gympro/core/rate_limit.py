"""
In-memory sliding-window rate limiter for the credential endpoints
State is per process; multiple workers each keep their own counters.
"""

import time
from collections import defaultdict
from typing import Dict, List, Tuple

from fastapi import HTTPException, Request, status

from gympro.core.config import settings
from gympro.core.logging_config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Sliding window: a request is allowed while fewer than max_requests fall inside the window"""

    def __init__(self):
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._last_cleanup = time.time()
        self._cleanup_interval = 60

    def _cleanup_old_entries(self, window_seconds: int):
        now = time.time()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds
        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [ts for ts in self._requests[identifier] if ts > cutoff]
            if not self._requests[identifier]:
                del self._requests[identifier]
        self._last_cleanup = now

    def is_allowed(self, identifier: str, max_requests: int, window_seconds: int) -> Tuple[bool, int, int]:
        """
        Record a request for identifier if it is under the limit

        Returns:
            (is_allowed, remaining_requests, retry_after_seconds)
        """
        self._cleanup_old_entries(window_seconds)

        now = time.time()
        window_start = now - window_seconds
        in_window = [ts for ts in self._requests[identifier] if ts > window_start]
        self._requests[identifier] = in_window

        if len(in_window) >= max_requests:
            retry_after = int(min(in_window) + window_seconds - now) + 1
            return False, 0, retry_after

        in_window.append(now)
        return True, max_requests - len(in_window), 0

    def reset(self):
        self._requests.clear()


rate_limiter = RateLimiter()


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


async def auth_rate_limit(request: Request):
    """
    Dependency for endpoints that accept credentials

    All of them share one bucket per client IP.
    """
    client_ip = get_client_ip(request)
    max_requests = settings.auth_rate_limit
    allowed, remaining, retry_after = rate_limiter.is_allowed(
        identifier=f"auth:{client_ip}",
        max_requests=max_requests,
        window_seconds=settings.AUTH_RATE_WINDOW_SECONDS,
    )
    if not allowed:
        logger.warning(f"Auth rate limit hit for {client_ip} on {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many attempts. Please try again later.",
            headers={
                "X-RateLimit-Limit": str(max_requests),
                "X-RateLimit-Remaining": "0",
                "Retry-After": str(retry_after),
            },
        )
