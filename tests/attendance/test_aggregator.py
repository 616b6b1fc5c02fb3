from src.site_attendance.site_attendance.attendance.aggregator import AttendanceAggregator
from src.site_attendance.site_attendance.common.datetime_utils import TimeZoneBucketing

from tests.fakes import lapaz, mark


def _agg():
    return AttendanceAggregator(TimeZoneBucketing())


def _one_day(marks):
    [summary] = _agg().summarize(marks)
    return summary


def test_in_and_out_give_worked_minutes():
    s = _one_day([mark("p-ana", "in", lapaz(2025, 1, 6, 8, 40)), mark("p-ana", "out", lapaz(2025, 1, 6, 18, 10))])
    assert s.day == "2025-01-06"
    assert s.worked_minutes == 570
    assert s.lunch_minutes == 0
    assert s.mark_count == 2
    assert s.present


def test_lunch_is_subtracted():
    s = _one_day(
        [
            mark("p-ana", "in", lapaz(2025, 1, 6, 8, 30)),
            mark("p-ana", "lunch_out", lapaz(2025, 1, 6, 13, 0)),
            mark("p-ana", "lunch_in", lapaz(2025, 1, 6, 14, 0)),
            mark("p-ana", "out", lapaz(2025, 1, 6, 18, 30)),
        ]
    )
    assert s.lunch_minutes == 60
    assert s.worked_minutes == 540


def test_without_in_the_first_mark_is_taken_as_arrival():
    s = _one_day([mark("p-ana", "out", lapaz(2025, 1, 6, 9, 0)), mark("p-ana", "out", lapaz(2025, 1, 6, 18, 0))])
    assert s.first_in == lapaz(2025, 1, 6, 9, 0)
    assert s.last_out == lapaz(2025, 1, 6, 18, 0)
    assert s.worked_minutes == 540


def test_typed_marks_win_over_chronological_fallback():
    s = _one_day(
        [
            mark("p-ana", "lunch_in", lapaz(2025, 1, 6, 7, 0)),
            mark("p-ana", "in", lapaz(2025, 1, 6, 8, 45)),
            mark("p-ana", "out", lapaz(2025, 1, 6, 17, 45)),
            mark("p-ana", "lunch_out", lapaz(2025, 1, 6, 19, 0)),
        ]
    )
    assert s.first_in == lapaz(2025, 1, 6, 8, 45)
    assert s.last_out == lapaz(2025, 1, 6, 17, 45)
    # lunch_in before lunch_out counts as zero lunch
    assert s.lunch_minutes == 0
    assert s.worked_minutes == 540


def test_single_mark_gives_zero_worked():
    s = _one_day([mark("p-ana", "in", lapaz(2025, 1, 6, 8, 30))])
    assert s.first_in == s.last_out
    assert s.worked_minutes == 0


def test_lone_out_mark_is_both_arrival_and_departure():
    s = _one_day([mark("p-ana", "out", lapaz(2025, 1, 6, 9, 0))])
    assert s.first_in == lapaz(2025, 1, 6, 9, 0)
    assert s.last_out == lapaz(2025, 1, 6, 9, 0)
    assert s.worked_minutes == 0


def test_repeated_marks_pick_earliest_in_and_latest_out():
    s = _one_day(
        [
            mark("p-ana", "in", lapaz(2025, 1, 6, 8, 45)),
            mark("p-ana", "in", lapaz(2025, 1, 6, 8, 35)),
            mark("p-ana", "out", lapaz(2025, 1, 6, 17, 0)),
            mark("p-ana", "out", lapaz(2025, 1, 6, 18, 0)),
        ]
    )
    assert s.first_in == lapaz(2025, 1, 6, 8, 35)
    assert s.last_out == lapaz(2025, 1, 6, 18, 0)
    assert s.mark_count == 4


def test_output_does_not_depend_on_input_order():
    marks = [
        mark("p-luis", "out", lapaz(2025, 1, 7, 18, 0), site_id="site-lpz"),
        mark("p-ana", "in", lapaz(2025, 1, 6, 8, 40)),
        mark("p-ana", "out", lapaz(2025, 1, 6, 18, 10)),
        mark("p-luis", "in", lapaz(2025, 1, 7, 9, 0), site_id="site-lpz"),
        mark("p-ana", "in", lapaz(2025, 1, 7, 8, 30)),
    ]
    forward = _agg().summarize(marks)
    backward = _agg().summarize(list(reversed(marks)))
    assert forward == backward
    assert [(s.person_id, s.day) for s in forward] == [
        ("p-ana", "2025-01-06"),
        ("p-ana", "2025-01-07"),
        ("p-luis", "2025-01-07"),
    ]


def test_late_evening_mark_belongs_to_its_local_day():
    late = lapaz(2025, 1, 6, 23, 30)
    assert late.day == 7  # already the next day in UTC
    s = _one_day([mark("p-ana", "out", late)])
    assert s.day == "2025-01-06"


def test_shift_crossing_midnight_is_not_stitched():
    summaries = _agg().summarize([mark("p-ana", "in", lapaz(2025, 1, 6, 23, 50)), mark("p-ana", "out", lapaz(2025, 1, 7, 0, 10))])
    assert [s.day for s in summaries] == ["2025-01-06", "2025-01-07"]
    assert all(s.worked_minutes == 0 for s in summaries)


def test_predominant_site_of_the_day():
    s = _one_day(
        [
            mark("p-ana", "in", lapaz(2025, 1, 6, 8, 30), site_id="site-lpz"),
            mark("p-ana", "lunch_out", lapaz(2025, 1, 6, 13, 0)),
            mark("p-ana", "lunch_in", lapaz(2025, 1, 6, 14, 0), site_id="site-lpz"),
            mark("p-ana", "out", lapaz(2025, 1, 6, 18, 30)),
            mark("p-ana", "out", lapaz(2025, 1, 6, 18, 31), site_id="site-lpz"),
        ]
    )
    assert s.site_id == "site-lpz"


def test_empty_day_summary():
    s = _agg().summarize_day("p-ana", "2025-01-06", [])
    assert not s.present
    assert s.worked_minutes == 0
    assert s.first_in is None
