"""
Client-side session storage
Keeps the token pair and the signed-in user, optionally persisted to a JSON file
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class TokenStore:
    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.load()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def set_session(self, access_token: str, refresh_token: str, user: Optional[Dict[str, Any]] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token
        if user is not None:
            self.user = user
        self.save()

    def set_tokens(self, access_token: str, refresh_token: str):
        self.set_session(access_token, refresh_token)

    def clear(self):
        self.access_token = None
        self.refresh_token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()

    def load(self):
        """Re-read the persisted session; unreadable files count as signed out"""
        if not self.path:
            return
        if not self.path.exists():
            self.access_token = self.refresh_token = self.user = None
            return
        try:
            state = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return
        self.access_token = state.get("accessToken")
        self.refresh_token = state.get("refreshToken")
        self.user = state.get("user")

    def save(self):
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        state = {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "user": self.user,
        }
        self.path.write_text(json.dumps(state), encoding="utf-8")
