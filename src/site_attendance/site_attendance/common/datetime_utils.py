from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo

from ..core.constants import POLICY_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    return datetime.strptime(value, "%Y-%m").date()


def utc_now() -> datetime:
    """Current instant, timezone-aware UTC.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now(timezone.utc)


def as_utc(instant: datetime) -> datetime:
    """Normalize to aware UTC. Naive values are taken to already be UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


class TimeZoneBucketing:
    """Civil-calendar view of absolute instants in one policy timezone.

    Every day key, clock minute and rest-day decision goes through here; there is
    no hand-written offset arithmetic anywhere else.

    Known limitation: a mark belongs to the civil day of its own instant, so a
    shift crossing local midnight is split across two days and not stitched.
    """

    def __init__(self, tz_name: str = POLICY_TIMEZONE):
        self._tz = ZoneInfo(tz_name)

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def to_local(self, instant: datetime) -> datetime:
        return as_utc(instant).astimezone(self._tz)

    def civil_date(self, instant: datetime) -> date:
        return self.to_local(instant).date()

    def civil_day_key(self, instant: datetime) -> str:
        return self.civil_date(instant).strftime("%Y-%m-%d")

    def minutes_of_day(self, instant: datetime) -> int:
        local = self.to_local(instant)
        return local.hour * 60 + local.minute

    def is_rest_day(self, instant: datetime) -> bool:
        return self.is_rest_date(self.civil_date(instant))

    @staticmethod
    def is_rest_date(day: date) -> bool:
        return day.weekday() == 6

    def day_bounds_utc(self, start: date, end: date) -> tuple[datetime, datetime]:
        """Half-open UTC interval covering local days start..end inclusive."""
        lo = datetime.combine(start, time(0), tzinfo=self._tz)
        hi = datetime.combine(end + timedelta(days=1), time(0), tzinfo=self._tz)
        return lo.astimezone(timezone.utc), hi.astimezone(timezone.utc)

    @staticmethod
    def iter_days(start: date, end: date) -> Iterator[date]:
        day = start
        while day <= end:
            yield day
            day += timedelta(days=1)
