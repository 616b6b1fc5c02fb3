from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import TimeZoneBucketing
from ..core.enums import MarkType
from .model import AttendanceMark, DailyAttendanceSummary


def _sort_key(mark: AttendanceMark):
    # Total order so that input order never leaks into the output.
    return (
        mark.observed_at,
        mark.mark_id if mark.mark_id is not None else -1,
        mark.mark_type.value,
        mark.site_id,
        mark.device_id or "",
    )


def _first_of(marks: Sequence[AttendanceMark], kind: MarkType) -> Optional[AttendanceMark]:
    return next((m for m in marks if m.mark_type == kind), None)


def _last_of(marks: Sequence[AttendanceMark], kind: MarkType) -> Optional[AttendanceMark]:
    return next((m for m in reversed(marks) if m.mark_type == kind), None)


def _predominant_site(marks: Sequence[AttendanceMark]) -> Optional[str]:
    counts: dict[str, int] = {}
    for m in marks:
        counts[m.site_id] = counts.get(m.site_id, 0) + 1
    if not counts:
        return None
    # dicts keep insertion order, so ties go to the site seen first
    return max(counts, key=lambda site_id: counts[site_id])


class AttendanceAggregator:
    """Reduce raw marks to one summary per person per civil day.

    Resolution rules:
    - first_in: earliest ``in`` mark, else the day's first mark of any type.
    - last_out: latest ``out`` mark, else the day's last mark of any type.
    - lunch_out: earliest ``lunch_out``; lunch_in: latest ``lunch_in``.
    Repeated marks are never deduplicated; the rules above decide which one wins.
    Days without marks are absent from the output.
    """

    def __init__(self, bucketing: TimeZoneBucketing):
        self._bucketing = bucketing

    @property
    def bucketing(self) -> TimeZoneBucketing:
        return self._bucketing

    def summarize(self, marks: Iterable[AttendanceMark]) -> list[DailyAttendanceSummary]:
        """Summaries for every (person, day) present in ``marks``, ordered by person then day."""
        buckets: dict[tuple[str, str], list[AttendanceMark]] = defaultdict(list)
        for mark in marks:
            key = (mark.person_id, self._bucketing.civil_day_key(mark.observed_at))
            buckets[key].append(mark)

        return [self.summarize_day(person_id, day, buckets[(person_id, day)]) for person_id, day in sorted(buckets)]

    def summarize_day(self, person_id: str, day: str, marks: Iterable[AttendanceMark]) -> DailyAttendanceSummary:
        ordered = sorted(marks, key=_sort_key)
        if not ordered:
            return DailyAttendanceSummary(
                person_id=person_id,
                day=day,
                first_in=None,
                last_out=None,
                lunch_out=None,
                lunch_in=None,
                worked_minutes=0,
                lunch_minutes=0,
                mark_count=0,
            )

        first_in = (_first_of(ordered, MarkType.IN) or ordered[0]).observed_at
        last_out = (_last_of(ordered, MarkType.OUT) or ordered[-1]).observed_at
        lunch_out_mark = _first_of(ordered, MarkType.LUNCH_OUT)
        lunch_in_mark = _last_of(ordered, MarkType.LUNCH_IN)

        minutes = self._bucketing.minutes_of_day
        worked = max(0, minutes(last_out) - minutes(first_in))

        lunch = 0
        if lunch_out_mark and lunch_in_mark:
            lunch = max(0, minutes(lunch_in_mark.observed_at) - minutes(lunch_out_mark.observed_at))
            worked = max(0, worked - lunch)

        return DailyAttendanceSummary(
            person_id=person_id,
            day=day,
            first_in=first_in,
            last_out=last_out,
            lunch_out=lunch_out_mark.observed_at if lunch_out_mark else None,
            lunch_in=lunch_in_mark.observed_at if lunch_in_mark else None,
            worked_minutes=worked,
            lunch_minutes=lunch,
            mark_count=len(ordered),
            site_id=_predominant_site(ordered),
        )
