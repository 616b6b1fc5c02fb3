from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import AccessToken


class AccessTokenRepository(Protocol):
    def find_valid(self, *, site_id: str, code: str, now: datetime) -> Optional[AccessToken]:
        """Token matching (site_id, code) exactly with expires_at > now."""

        raise NotImplementedError

    def create(self, token: AccessToken) -> None:
        raise NotImplementedError

    def purge_expired(self, *, now: datetime) -> int:
        raise NotImplementedError
