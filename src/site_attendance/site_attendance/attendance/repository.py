from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceMark


class MarkRepository(Protocol):
    """Append-only store of raw marks. Marks are never updated or deleted."""

    def insert(self, mark: AttendanceMark) -> int:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        site_id: Optional[str] = None,
        person_id: Optional[str] = None,
    ) -> Sequence[AttendanceMark]:
        """Marks with start <= observed_at < end, oldest first."""

        raise NotImplementedError
