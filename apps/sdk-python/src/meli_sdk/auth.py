"""Bearer-token credentials shared by all three backends."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

TOKEN_REFRESH_BUFFER = timedelta(minutes=5)


class Credential:
    """Caller-owned token holder.

    Tokens can be rotated at any time; every ``get_headers()`` call reads the
    current value, so a request that is retrying picks up the new token on its
    next attempt.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.expires_at = expires_at

    def __repr__(self) -> str:
        state = "set" if self.access_token else "unset"
        return f"Credential(access_token=<{state}>, expires_at={self.expires_at!r})"

    def set_access_token(self, access_token: Optional[str]) -> None:
        self.access_token = access_token

    def set_refresh_token(self, refresh_token: Optional[str]) -> None:
        self.refresh_token = refresh_token

    def update(
        self,
        *,
        access_token: Optional[str],
        refresh_token: Optional[str] = None,
        expires_in: Optional[float] = None,
    ) -> None:
        self.access_token = access_token
        if refresh_token:
            self.refresh_token = refresh_token
        if expires_in is not None:
            self.expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None
        self.expires_at = None

    def is_expired(self, buffer: timedelta = TOKEN_REFRESH_BUFFER) -> bool:
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) + buffer >= expires_at

    def get_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers


__all__ = ["Credential", "TOKEN_REFRESH_BUFFER"]
