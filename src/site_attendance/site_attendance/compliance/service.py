from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.aggregator import AttendanceAggregator
from ..attendance.model import AttendanceMark, DailyAttendanceSummary
from ..attendance.repository import MarkRepository
from ..common.datetime_utils import parse_month
from ..common.text import fold_text
from ..core.constants import NO_PERSON_NAME, NO_SITE_NAME, REPORT_MAX_DAYS
from ..core.enums import MarkType, ReportRowType, Role
from ..core.exceptions import StorageError, ValidationError
from ..people.model import Person
from ..people.repository import PersonRepository
from ..sites.repository import SiteRepository
from .calculator.base import ComplianceCalculator
from .model import ComplianceReport, ComplianceRow, DayMetrics, PersonMonth

logger = logging.getLogger(__name__)

# Roles that appear in the compliance report.
REPORTED_ROLES = frozenset({Role.ADVISOR, Role.COORDINATOR, Role.LEADER})


class ComplianceReportService:
    """Use case: build compliance reports on demand from raw marks.

    Nothing here is cached or stored; the same marks always give the same report.
    """

    def __init__(
        self,
        marks: MarkRepository,
        people: PersonRepository,
        sites: SiteRepository,
        *,
        aggregator: AttendanceAggregator,
        calculator: ComplianceCalculator,
    ):
        self._marks = marks
        self._people = people
        self._sites = sites
        self._aggregator = aggregator
        self._calculator = calculator
        self._bucketing = aggregator.bucketing

    def build_report(
        self,
        *,
        start: date,
        end: date,
        site_id: Optional[str] = None,
        name_query: Optional[str] = None,
    ) -> ComplianceReport:
        if end < start:
            raise ValidationError("end must not be before start")
        if end >= date.max:
            raise ValidationError("end is out of range")
        if (end - start).days >= REPORT_MAX_DAYS:
            raise ValidationError(f"range must not exceed {REPORT_MAX_DAYS} days")

        marks, degraded = self._fetch_marks(start, end, site_id=site_id)

        people = self._eligible_people(marks, name_query=name_query)
        person_ids = {p.person_id for p in people}
        marks = [m for m in marks if m.person_id in person_ids]

        site_ids = {m.site_id for m in marks} | {p.assigned_site_id for p in people if p.assigned_site_id}
        site_names = {s.site_id: s.name or NO_SITE_NAME for s in self._sites.list_by_ids(site_ids)}

        summaries = {(s.person_id, s.day): s for s in self._aggregator.summarize(marks)}
        days = list(self._bucketing.iter_days(start, end))

        rows: list[ComplianceRow] = []
        for person in people:
            name = person.full_name or NO_PERSON_NAME
            assigned_name = site_names.get(person.assigned_site_id or "", NO_SITE_NAME)

            day_metrics: list[DayMetrics] = []
            for day in days:
                key = day.strftime("%Y-%m-%d")
                summary = summaries.get((person.person_id, key))
                metrics = self._calculator.day_metrics(day, summary)
                day_metrics.append(metrics)
                if not metrics.counted:
                    continue
                rows.append(self._day_row(person, name, key, summary, metrics, site_names, assigned_name))

            rows.append(
                ComplianceRow(
                    row_type=ReportRowType.PERSON_TOTAL,
                    person_id=person.person_id,
                    person_name=name,
                    site_id=person.assigned_site_id,
                    site_name=assigned_name,
                    metrics=self._calculator.rollup(day_metrics),
                )
            )

        # Each row sorts on its own site, so a day worked elsewhere leaves its person block.
        rows.sort(key=_row_sort_key)
        return ComplianceReport(rows=rows, degraded_days=degraded)

    def build_person_month(self, *, person_id: str, month: str) -> PersonMonth:
        try:
            first = parse_month(month)
        except ValueError as exc:
            raise ValidationError("month must be YYYY-MM") from exc
        last = first.replace(day=calendar.monthrange(first.year, first.month)[1])
        if last >= date.max:
            raise ValidationError("month is out of range")

        lo, hi = self._bucketing.day_bounds_utc(first, last)
        marks = self._marks.list_between(start=lo, end=hi, person_id=person_id)
        days = [self._localized(s) for s in self._aggregator.summarize(marks)]

        return PersonMonth(
            person_id=person_id,
            month=first.strftime("%Y-%m"),
            days=days,
            days_with_marks=len(days),
            ins=sum(1 for m in marks if m.mark_type == MarkType.IN),
            outs=sum(1 for m in marks if m.mark_type == MarkType.OUT),
        )

    def _fetch_marks(
        self, start: date, end: date, *, site_id: Optional[str]
    ) -> tuple[list[AttendanceMark], list[str]]:
        """All marks in the local range; on failure retry day by day and leave unreadable days empty."""
        lo, hi = self._bucketing.day_bounds_utc(start, end)
        try:
            return list(self._marks.list_between(start=lo, end=hi, site_id=site_id)), []
        except StorageError as exc:
            logger.warning("range read failed (%s..%s), falling back to per-day reads: %s", start, end, exc)

        marks: list[AttendanceMark] = []
        degraded: list[str] = []
        for day in self._bucketing.iter_days(start, end):
            day_lo, day_hi = self._bucketing.day_bounds_utc(day, day)
            try:
                marks.extend(self._marks.list_between(start=day_lo, end=day_hi, site_id=site_id))
            except StorageError as exc:
                logger.warning("marks for %s unreadable, reporting the day as empty: %s", day, exc)
                degraded.append(day.strftime("%Y-%m-%d"))
        return marks, degraded

    def _eligible_people(self, marks: Sequence[AttendanceMark], *, name_query: Optional[str]) -> list[Person]:
        with_marks = {m.person_id for m in marks}
        needle = fold_text(name_query)
        out = []
        for person in self._people.list_by_ids(with_marks):
            if not person.active or person.role not in REPORTED_ROLES:
                continue
            if needle and needle not in fold_text(person.full_name):
                continue
            out.append(person)
        return out

    def _day_row(
        self,
        person: Person,
        name: str,
        day: str,
        summary: Optional[DailyAttendanceSummary],
        metrics: DayMetrics,
        site_names: dict[str, str],
        assigned_name: str,
    ) -> ComplianceRow:
        site_id = person.assigned_site_id
        site_name = assigned_name
        if summary and summary.site_id:
            site_id = summary.site_id
            site_name = site_names.get(summary.site_id, assigned_name)

        local = self._localized(summary) if summary else None
        return ComplianceRow(
            row_type=ReportRowType.DAY,
            person_id=person.person_id,
            person_name=name,
            site_id=site_id,
            site_name=site_name,
            metrics=metrics,
            date=day,
            present=bool(summary and summary.present),
            first_in=local.first_in if local else None,
            last_out=local.last_out if local else None,
            lunch_out=local.lunch_out if local else None,
            lunch_in=local.lunch_in if local else None,
            lunch_minutes=local.lunch_minutes if local else None,
        )

    def _localized(self, summary: DailyAttendanceSummary) -> DailyAttendanceSummary:
        to_local = self._bucketing.to_local
        return DailyAttendanceSummary(
            person_id=summary.person_id,
            day=summary.day,
            first_in=to_local(summary.first_in) if summary.first_in else None,
            last_out=to_local(summary.last_out) if summary.last_out else None,
            lunch_out=to_local(summary.lunch_out) if summary.lunch_out else None,
            lunch_in=to_local(summary.lunch_in) if summary.lunch_in else None,
            worked_minutes=summary.worked_minutes,
            lunch_minutes=summary.lunch_minutes,
            mark_count=summary.mark_count,
            site_id=summary.site_id,
        )


def _row_sort_key(row: ComplianceRow) -> tuple:
    return (
        fold_text(row.site_name),
        fold_text(row.person_name),
        row.person_id,
        row.row_type == ReportRowType.PERSON_TOTAL,
        row.date or "",
    )
