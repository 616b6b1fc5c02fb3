from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from ...attendance.model import DailyAttendanceSummary
from ..model import DayMetrics


class ComplianceCalculator(ABC):
    """Calculator interface (Strategy Pattern for schedule compliance)."""

    @abstractmethod
    def day_metrics(self, day: date, summary: Optional[DailyAttendanceSummary]) -> DayMetrics:
        raise NotImplementedError

    @abstractmethod
    def rollup(self, days: Iterable[DayMetrics]) -> DayMetrics:
        raise NotImplementedError
