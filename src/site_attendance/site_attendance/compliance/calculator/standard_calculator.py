from __future__ import annotations

import math
from datetime import date, time
from typing import Iterable, Optional

from ...attendance.model import DailyAttendanceSummary
from ...common.datetime_utils import TimeZoneBucketing
from ...core.constants import SCHED_END, SCHED_START
from ..model import DayMetrics
from .base import ComplianceCalculator


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clock_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


class StandardComplianceCalculator(ComplianceCalculator):
    """Fixed schedule 08:30-18:30, Monday to Saturday.

    Rest days are excluded entirely: they add nothing to worked or expected
    minutes whatever marks exist on them.
    """

    def __init__(
        self,
        bucketing: TimeZoneBucketing,
        *,
        start: time = SCHED_START,
        end: time = SCHED_END,
    ):
        self._bucketing = bucketing
        self._start = _clock_minutes(start)
        self._end = _clock_minutes(end)

    @property
    def expected_minutes(self) -> int:
        return self._end - self._start

    def day_metrics(self, day: date, summary: Optional[DailyAttendanceSummary]) -> DayMetrics:
        if self._bucketing.is_rest_date(day):
            return DayMetrics(0, 0, 0, 0, 0, counted=False)

        worked = summary.worked_minutes if summary else 0
        late = 0
        early = 0
        if summary and summary.first_in:
            late = max(0, self._bucketing.minutes_of_day(summary.first_in) - self._start)
        if summary and summary.last_out:
            early = max(0, self._end - self._bucketing.minutes_of_day(summary.last_out))

        expected = self.expected_minutes
        pct = min(100, max(0, round_half_up(worked / expected * 100))) if expected else 0
        return DayMetrics(
            worked_minutes=worked,
            expected_minutes=expected,
            late_minutes=late,
            early_leave_minutes=early,
            compliance_pct=pct,
        )

    def rollup(self, days: Iterable[DayMetrics]) -> DayMetrics:
        counted = [d for d in days if d.counted]
        worked = sum(d.worked_minutes for d in counted)
        expected = sum(d.expected_minutes for d in counted)
        return DayMetrics(
            worked_minutes=worked,
            expected_minutes=expected,
            late_minutes=sum(d.late_minutes for d in counted),
            early_leave_minutes=sum(d.early_leave_minutes for d in counted),
            compliance_pct=round_half_up(worked / expected * 100) if expected > 0 else 0,
        )
