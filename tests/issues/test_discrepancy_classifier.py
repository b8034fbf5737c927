from __future__ import annotations

from datetime import date

import pytest

from src.time_accounting.time_accounting.core.enums import DiscrepancyKind
from src.time_accounting.time_accounting.issues.detector import ThresholdDiscrepancyClassifier
from src.time_accounting.time_accounting.summary.model import DailySummary, SegmentBreakdown

from conftest import jst


def _segment(open_=False):
    return SegmentBreakdown(
        segment_id=1,
        start_time=jst(2024, 6, 7, 9, 0),
        end_time=None if open_ else jst(2024, 6, 7, 17, 0),
        base_minutes=0 if open_ else 480,
        net_minutes=0 if open_ else 400,
    )


def _summary(attendance, work, segments=(_segment(),), has_attendance=True):
    return DailySummary(
        user_id=1,
        work_date=date(2024, 6, 7),
        attendance_minutes=attendance,
        work_minutes=work,
        segments=tuple(segments),
        has_attendance=has_attendance,
    )


@pytest.fixture
def classifier():
    return ThresholdDiscrepancyClassifier(60)


def test_480_attendance_300_work_is_low(classifier):
    summary = _summary(480, 300)
    assert summary.difference_minutes == -180
    assert classifier.classify(summary) == DiscrepancyKind.LOW


@pytest.mark.parametrize(
    "attendance,work,expected",
    [
        (400, 461, DiscrepancyKind.EXCESSIVE),
        (400, 460, DiscrepancyKind.NONE),
        (400, 340, DiscrepancyKind.NONE),
        (400, 339, DiscrepancyKind.LOW),
    ],
)
def test_threshold_is_exclusive(classifier, attendance, work, expected):
    assert classifier.classify(_summary(attendance, work)) == expected


def test_sign_follows_difference(classifier):
    for diff in range(-300, 301, 7):
        kind = classifier.classify(_summary(400, 400 + diff))
        if kind == DiscrepancyKind.EXCESSIVE:
            assert diff > 60
        if kind == DiscrepancyKind.LOW:
            assert diff < -60


def test_attendance_without_reported_work_is_an_issue(classifier):
    assert classifier.classify(_summary(30, 0, segments=())) == DiscrepancyKind.ISSUE
    assert classifier.classify(_summary(0, 0, segments=(_segment(open_=True),))) == DiscrepancyKind.ISSUE


def test_day_without_attendance_or_segments_is_clean(classifier):
    assert classifier.classify(_summary(0, 0, segments=(), has_attendance=False)) == DiscrepancyKind.NONE


def test_custom_threshold():
    assert ThresholdDiscrepancyClassifier(10).classify(_summary(400, 389)) == DiscrepancyKind.LOW
