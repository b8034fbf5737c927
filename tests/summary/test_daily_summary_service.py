from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.time_accounting.time_accounting.breaks.model import BreakRule
from src.time_accounting.time_accounting.core.exceptions import NotFoundError

from conftest import jst

DAY = date(2024, 6, 7)


def test_summary_subtracts_breaks_from_segments(summary_service, attendance, segments):
    attendance.add(1, DAY, "09:00", "18:00", work_minutes=460)
    segments.add(1, jst(2024, 6, 7, 9, 0), jst(2024, 6, 7, 14, 0))
    segments.add(1, jst(2024, 6, 7, 14, 0), jst(2024, 6, 7, 18, 0))

    summary = summary_service.compute_daily_summary(1, DAY)

    assert summary.attendance_minutes == 460
    assert summary.work_minutes == 220 + 240
    assert summary.difference_minutes == 0
    assert [s.net_minutes for s in summary.segments] == [220, 240]
    assert summary.has_attendance and not summary.attendance_open


def test_difference_sign_is_work_minus_attendance(summary_service, attendance, segments):
    attendance.add(1, DAY, "09:00", "18:00", work_minutes=480)
    segments.add(1, jst(2024, 6, 7, 13, 20), jst(2024, 6, 7, 18, 20))

    summary = summary_service.compute_daily_summary(1, DAY)

    assert summary.work_minutes == 300
    assert summary.difference_minutes == summary.work_minutes - summary.attendance_minutes == -180


def test_only_segments_starting_that_day_are_counted(summary_service, segments):
    segments.add(1, jst(2024, 6, 6, 23, 0), jst(2024, 6, 7, 1, 0))
    segments.add(1, jst(2024, 6, 7, 23, 0), jst(2024, 6, 8, 1, 0))

    summary = summary_service.compute_daily_summary(1, DAY)

    assert [s.start_time for s in summary.segments] == [jst(2024, 6, 7, 23, 0)]
    assert summary.work_minutes == 120


def test_open_segment_and_open_attendance_count_zero(summary_service, attendance, segments):
    attendance.add(1, DAY, "09:00")
    segments.add(1, jst(2024, 6, 7, 9, 0), None)

    summary = summary_service.compute_daily_summary(1, DAY)

    assert summary.attendance_minutes == 0
    assert summary.work_minutes == 0
    assert summary.open_segments == 1
    assert summary.attendance_open


def test_missing_cached_minutes_are_recomputed(summary_service, attendance):
    attendance.add(1, DAY, "09:00", "18:00", work_minutes=None)
    assert summary_service.compute_daily_summary(1, DAY).attendance_minutes == 540 - 80


def test_no_records_gives_empty_summary(summary_service):
    summary = summary_service.compute_daily_summary(2, DAY)
    assert summary.attendance_minutes == summary.work_minutes == 0
    assert summary.segments == ()
    assert not summary.has_attendance


def test_current_rules_apply_to_past_days(summary_service, segments, break_rules):
    segments.add(1, jst(2024, 6, 7, 9, 0), jst(2024, 6, 7, 14, 0))
    assert summary_service.compute_daily_summary(1, DAY).work_minutes == 220

    break_rules.rules[1] = BreakRule(1, "Lunch", "12:00", "13:00", 60, is_active=False)
    assert summary_service.compute_daily_summary(1, DAY).work_minutes == 300


def test_summary_is_repeatable(summary_service, attendance, segments):
    attendance.add(1, DAY, "09:00", "18:00", work_minutes=460)
    segments.add(1, jst(2024, 6, 7, 9, 0), jst(2024, 6, 7, 14, 0))
    assert summary_service.compute_daily_summary(1, DAY) == summary_service.compute_daily_summary(1, DAY)


def test_unknown_user_is_rejected(summary_service):
    with pytest.raises(NotFoundError):
        summary_service.compute_daily_summary(404, DAY - timedelta(days=1))
