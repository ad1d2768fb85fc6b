"""Admin console session: only ADMIN accounts may stay signed in"""

import logging
from typing import Any, Dict

from gympro.client.api_client import ApiClient, ApiError

logger = logging.getLogger(__name__)


class NotAdminError(Exception):
    pass


class AdminSession:
    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.client.login(email, password)
        if data["user"].get("role") != "ADMIN":
            self.client.logout()
            raise NotAdminError("Access denied. Admin privileges required.")
        return data["user"]

    async def verify(self) -> Dict[str, Any]:
        """
        Re-check the stored session against the server

        Returns:
            the current user

        Raises:
            NotAdminError: no session, or the user is not (or no longer) an admin;
                the stored session is cleared
        """
        tokens = self.client.tokens
        tokens.load()
        if not tokens.access_token:
            raise NotAdminError("Not signed in")

        try:
            user = await self.client.get("/api/auth/me")
        except ApiError as e:
            logger.info(f"Admin session check failed: {e}")
            tokens.clear()
            raise NotAdminError("Session is no longer valid") from e

        if user.get("role") != "ADMIN":
            tokens.clear()
            raise NotAdminError("Access denied. Admin privileges required.")

        tokens.user = user
        tokens.save()
        return user
