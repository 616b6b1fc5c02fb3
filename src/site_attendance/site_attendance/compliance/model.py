from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..attendance.model import DailyAttendanceSummary
from ..core.enums import ReportRowType


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


@dataclass(frozen=True)
class DayMetrics:
    """Compliance numbers for one civil day, or a rollup of several."""

    worked_minutes: int
    expected_minutes: int
    late_minutes: int
    early_leave_minutes: int
    compliance_pct: int
    counted: bool = True


@dataclass(frozen=True)
class ComplianceRow:
    """Read-model row of the compliance report (a person-day or a person subtotal).

    Timestamps are already converted to the policy timezone.
    """

    row_type: ReportRowType
    person_id: str
    person_name: str
    site_id: Optional[str]
    site_name: str
    metrics: DayMetrics
    date: Optional[str] = None
    present: Optional[bool] = None
    first_in: Optional[datetime] = None
    last_out: Optional[datetime] = None
    lunch_out: Optional[datetime] = None
    lunch_in: Optional[datetime] = None
    lunch_minutes: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "row_type": self.row_type.value,
            "site_id": self.site_id,
            "site_name": self.site_name,
            "person_id": self.person_id,
            "person_name": self.person_name,
            "date": self.date,
            "first_in": _iso(self.first_in),
            "last_out": _iso(self.last_out),
            "lunch_out": _iso(self.lunch_out),
            "lunch_in": _iso(self.lunch_in),
            "lunch_minutes": self.lunch_minutes,
            "worked_minutes": self.metrics.worked_minutes,
            "expected_minutes": self.metrics.expected_minutes,
            "late_minutes": self.metrics.late_minutes,
            "early_leave_minutes": self.metrics.early_leave_minutes,
            "present": self.present,
            "compliance_pct": self.metrics.compliance_pct,
        }


@dataclass(frozen=True)
class ComplianceReport:
    rows: list[ComplianceRow]
    degraded_days: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"data": [r.to_dict() for r in self.rows], "degraded_days": list(self.degraded_days)}


@dataclass(frozen=True)
class PersonMonth:
    """Personal monthly view: daily summaries plus a few counters."""

    person_id: str
    month: str
    days: list[DailyAttendanceSummary]
    days_with_marks: int
    ins: int
    outs: int

    def to_dict(self) -> dict:
        return {
            "person_id": self.person_id,
            "month": self.month,
            "kpis": {"days_with_marks": self.days_with_marks, "ins": self.ins, "outs": self.outs},
            "days": [
                {
                    "date": d.day,
                    "first_in": _iso(d.first_in),
                    "last_out": _iso(d.last_out),
                    "lunch_out": _iso(d.lunch_out),
                    "lunch_in": _iso(d.lunch_in),
                    "lunch_minutes": d.lunch_minutes,
                    "worked_minutes": d.worked_minutes,
                    "marks": d.mark_count,
                    "site_id": d.site_id,
                }
                for d in self.days
            ],
        }
