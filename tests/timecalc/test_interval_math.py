from __future__ import annotations

from src.time_accounting.time_accounting.timecalc.interval_math import (
    FULL_DAY,
    MinuteInterval,
    clamp_to_day,
    merge_intervals,
    normalize,
    overlap_minutes,
    span_from,
    total_length,
    wrapped_duration,
)


def test_overlap_of_disjoint_intervals_is_zero():
    assert overlap_minutes(MinuteInterval(540, 600), MinuteInterval(720, 800)) == 0


def test_overlap_is_symmetric_and_bounded():
    a = MinuteInterval(540, 840)
    b = MinuteInterval(720, 800)
    assert overlap_minutes(a, b) == overlap_minutes(b, a) == 80
    assert overlap_minutes(a, b) <= min(a.length, b.length)


def test_touching_intervals_do_not_overlap():
    assert overlap_minutes(MinuteInterval(540, 720), MinuteInterval(720, 780)) == 0


def test_midnight_crossing_interval_splits_into_two_pieces():
    night = MinuteInterval(1380, 60)
    assert night.crosses_midnight
    assert night.length == 120
    assert clamp_to_day(night) == [MinuteInterval(1380, 1440), MinuteInterval(0, 60)]


def test_overlap_with_midnight_crossing_window():
    night = MinuteInterval(1380, 60)
    assert overlap_minutes(MinuteInterval(0, 30), night) == 30
    assert overlap_minutes(MinuteInterval(1400, 1440), night) == 40


def test_wrapped_duration_wraps_past_midnight():
    assert wrapped_duration(720, 800) == 80
    assert wrapped_duration(1380, 60) == 120
    assert wrapped_duration(600, 600) == 0


def test_normalize_ending_at_midnight():
    assert normalize(1380, 1440) == MinuteInterval(1380, 1440)


def test_span_of_a_day_or_more_is_the_whole_day():
    assert span_from(600, 1440) == FULL_DAY
    assert span_from(600, 3000) == FULL_DAY


def test_empty_span():
    assert span_from(600, 0).length == 0
    assert span_from(600, -5).length == 0


def test_merge_intervals_unions_overlaps():
    merged = merge_intervals([MinuteInterval(720, 780), MinuteInterval(750, 800), MinuteInterval(900, 910)])
    assert merged == [MinuteInterval(720, 800), MinuteInterval(900, 910)]
    assert total_length(merged) == 90
