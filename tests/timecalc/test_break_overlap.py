from __future__ import annotations

import pytest

from src.time_accounting.time_accounting.breaks.model import BreakRule
from src.time_accounting.time_accounting.core.enums import BreakOverlapMode
from src.time_accounting.time_accounting.timecalc.break_overlap import (
    MergedBreakOverlapCalculator,
    SummedBreakOverlapCalculator,
    build_calculator,
)

from conftest import LUNCH, jst, JST

AFTERNOON = BreakRule(2, "Afternoon", "15:00", "15:15", 15)


def test_segment_through_lunch_nets_220_minutes():
    calc = SummedBreakOverlapCalculator()
    result = calc.calculate_segment(start=jst(2024, 6, 10, 9, 0), end=jst(2024, 6, 10, 14, 0), rules=[LUNCH], tz=JST)

    assert result.base_minutes == 300
    assert result.break_minutes == 80
    assert result.net_minutes == 220
    assert [(b.rule_name, b.overlap_minutes) for b in result.break_breakdown] == [("Lunch", 80)]


def test_open_segment_counts_zero():
    calc = SummedBreakOverlapCalculator()
    result = calc.calculate_segment(start=jst(2024, 6, 10, 9, 0), end=None, rules=[LUNCH], tz=JST)
    assert result.net_minutes == 0
    assert result.base_minutes == 0


def test_partial_overlap_and_no_overlap():
    calc = SummedBreakOverlapCalculator()
    assert calc.calculate_clock_times("12:30", "14:00", [LUNCH]).net_minutes == 90 - 50
    assert calc.calculate_clock_times("08:00", "11:00", [LUNCH]).net_minutes == 180


def test_inactive_and_zero_length_rules_are_ignored():
    calc = SummedBreakOverlapCalculator()
    inactive = BreakRule(3, "Old lunch", "12:00", "13:00", 60, is_active=False)
    empty = BreakRule(4, "Empty", "10:00", "10:00", 0)
    assert calc.calculate_clock_times("09:00", "14:00", [inactive, empty]).net_minutes == 300


def test_break_wholly_covering_work_nets_zero():
    calc = SummedBreakOverlapCalculator()
    assert calc.calculate_clock_times("12:10", "12:40", [LUNCH]).net_minutes == 0


def test_clock_out_before_clock_in_clamps_to_zero():
    calc = SummedBreakOverlapCalculator()
    assert calc.calculate_clock_times("17:00", "09:00", [LUNCH]).net_minutes == 0


def test_break_crossing_midnight():
    calc = SummedBreakOverlapCalculator()
    night = BreakRule(5, "Night", "23:30", "00:30", 60)
    result = calc.calculate_segment(start=jst(2024, 6, 10, 22, 0), end=jst(2024, 6, 11, 1, 0), rules=[night], tz=JST)
    assert result.base_minutes == 180
    assert result.net_minutes == 120


def test_full_day_segment_subtracts_each_break_once():
    calc = SummedBreakOverlapCalculator()
    result = calc.calculate_segment(start=jst(2024, 6, 10, 0, 0), end=jst(2024, 6, 12, 0, 0), rules=[LUNCH], tz=JST)
    assert result.base_minutes == 2 * 1440
    assert result.break_minutes == 80


@pytest.mark.parametrize("calc", [SummedBreakOverlapCalculator(), MergedBreakOverlapCalculator()])
def test_net_is_bounded_by_base(calc):
    rules = [LUNCH, AFTERNOON, BreakRule(6, "Overlap", "12:30", "14:00", 90)]
    for start, end in [("09:00", "18:00"), ("12:00", "13:00"), ("13:00", "15:10"), ("00:00", "23:59")]:
        result = calc.calculate_clock_times(start, end, rules)
        assert 0 <= result.net_minutes <= result.base_minutes


def test_overlapping_rules_summed_versus_merged():
    rules = [LUNCH, BreakRule(6, "Overlap", "12:30", "14:00", 90)]

    summed = SummedBreakOverlapCalculator().calculate_clock_times("09:00", "18:00", rules)
    merged = MergedBreakOverlapCalculator().calculate_clock_times("09:00", "18:00", rules)

    # 12:30-13:20 is shared by both rules
    assert summed.break_minutes == 80 + 90
    assert merged.break_minutes == 120
    assert [(b.rule_name, b.overlap_minutes) for b in merged.break_breakdown] == [("Lunch", 80), ("Overlap", 40)]


def test_build_calculator_by_mode():
    assert isinstance(build_calculator("sum"), SummedBreakOverlapCalculator)
    assert isinstance(build_calculator(BreakOverlapMode.MERGE), MergedBreakOverlapCalculator)
    with pytest.raises(ValueError):
        build_calculator("nope")
