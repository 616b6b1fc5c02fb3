from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AccessToken:
    """Short-lived check-in code scoped to one site.

    Two sites may hold the same code; the pair (site_id, code) is the key.
    """

    site_id: str
    code: str
    expires_at: datetime

    def is_usable(self, *, site_id: str, now: datetime) -> bool:
        return self.site_id == site_id and now < self.expires_at
