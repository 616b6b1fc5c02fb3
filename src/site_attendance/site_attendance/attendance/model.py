from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MarkType


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: one raw, immutable attendance event.

    ``observed_at`` is aware UTC. Break marks carry no position or evidence.
    """

    person_id: str
    site_id: str
    mark_type: MarkType
    observed_at: datetime
    lat: Optional[float] = None
    lng: Optional[float] = None
    accuracy_m: Optional[float] = None
    device_id: Optional[str] = None
    evidence_ref: Optional[str] = None
    mark_id: Optional[int] = None


@dataclass(frozen=True)
class DailyAttendanceSummary:
    """Read-model: one person's marks on one civil day, reduced.

    Never persisted; recomputed from marks on every query.
    """

    person_id: str
    day: str
    first_in: Optional[datetime]
    last_out: Optional[datetime]
    lunch_out: Optional[datetime]
    lunch_in: Optional[datetime]
    worked_minutes: int
    lunch_minutes: int
    mark_count: int
    site_id: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.mark_count > 0
