from datetime import date

from src.site_attendance.site_attendance.attendance.aggregator import AttendanceAggregator
from src.site_attendance.site_attendance.common.datetime_utils import TimeZoneBucketing
from src.site_attendance.site_attendance.compliance.calculator.standard_calculator import (
    StandardComplianceCalculator,
    round_half_up,
)

from tests.fakes import lapaz, mark

MONDAY = date(2025, 1, 6)
TUESDAY = date(2025, 1, 7)
WEDNESDAY = date(2025, 1, 8)
SUNDAY = date(2025, 1, 12)


def _summary(*marks):
    [s] = AttendanceAggregator(TimeZoneBucketing()).summarize(list(marks))
    return s


def _calc():
    return StandardComplianceCalculator(TimeZoneBucketing())


def test_expected_minutes_for_fixed_schedule():
    assert _calc().expected_minutes == 600


def test_late_arrival_and_early_leave():
    s = _summary(mark("p-ana", "in", lapaz(2025, 1, 6, 8, 40)), mark("p-ana", "out", lapaz(2025, 1, 6, 18, 10)))
    m = _calc().day_metrics(MONDAY, s)
    assert (m.worked_minutes, m.expected_minutes, m.late_minutes, m.early_leave_minutes) == (570, 600, 10, 20)
    assert m.compliance_pct == 95
    assert m.counted


def test_lunch_reduces_compliance():
    s = _summary(
        mark("p-ana", "in", lapaz(2025, 1, 6, 8, 30)),
        mark("p-ana", "lunch_out", lapaz(2025, 1, 6, 13, 0)),
        mark("p-ana", "lunch_in", lapaz(2025, 1, 6, 14, 0)),
        mark("p-ana", "out", lapaz(2025, 1, 6, 18, 30)),
    )
    m = _calc().day_metrics(MONDAY, s)
    assert m.late_minutes == 0 and m.early_leave_minutes == 0
    assert m.compliance_pct == 90


def test_compliance_is_capped_at_100():
    s = _summary(mark("p-ana", "in", lapaz(2025, 1, 6, 7, 0)), mark("p-ana", "out", lapaz(2025, 1, 6, 20, 0)))
    m = _calc().day_metrics(MONDAY, s)
    assert m.worked_minutes == 780
    assert m.compliance_pct == 100


def test_absent_working_day_still_expects_full_schedule():
    m = _calc().day_metrics(TUESDAY, None)
    assert (m.worked_minutes, m.expected_minutes, m.late_minutes, m.early_leave_minutes, m.compliance_pct) == (0, 600, 0, 0, 0)


def test_sunday_is_excluded_even_with_marks():
    s = _summary(mark("p-ana", "in", lapaz(2025, 1, 12, 9, 0)), mark("p-ana", "out", lapaz(2025, 1, 12, 13, 0)))
    m = _calc().day_metrics(SUNDAY, s)
    assert not m.counted
    assert m.expected_minutes == 0 and m.worked_minutes == 0


def test_rollup_sums_counted_days_only():
    calc = _calc()
    worked = _summary(mark("p-ana", "in", lapaz(2025, 1, 6, 8, 40)), mark("p-ana", "out", lapaz(2025, 1, 6, 18, 10)))
    sunday = _summary(mark("p-ana", "in", lapaz(2025, 1, 12, 9, 0)), mark("p-ana", "out", lapaz(2025, 1, 12, 13, 0)))
    total = calc.rollup(
        [
            calc.day_metrics(MONDAY, worked),
            calc.day_metrics(TUESDAY, None),
            calc.day_metrics(WEDNESDAY, None),
            calc.day_metrics(SUNDAY, sunday),
        ]
    )
    assert total.worked_minutes == 570
    assert total.expected_minutes == 1800
    assert total.late_minutes == 10
    assert total.early_leave_minutes == 20
    assert total.compliance_pct == 32


def test_rollup_of_rest_days_only_is_zero():
    calc = _calc()
    total = calc.rollup([calc.day_metrics(SUNDAY, None)])
    assert total.expected_minutes == 0
    assert total.compliance_pct == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(94.49) == 94
    assert round_half_up(0.0) == 0
