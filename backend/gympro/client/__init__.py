from gympro.client.tokens import TokenStore
from gympro.client.api_client import ApiClient, ApiError, SessionExpiredError
from gympro.client.admin import AdminSession, NotAdminError

__all__ = [
    "TokenStore",
    "ApiClient",
    "ApiError",
    "SessionExpiredError",
    "AdminSession",
    "NotAdminError",
]
