from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Iterable, Optional, Sequence

from ..breaks.model import BreakRule
from ..common.datetime_utils import minute_of_day, parse_hhmm, to_local
from ..core.enums import BreakOverlapMode
from .interval_math import (
    MinuteInterval,
    clamp_to_day,
    intersect,
    merge_intervals,
    overlap_minutes,
    span_from,
    total_length,
)


@dataclass(frozen=True)
class BreakOverlap:
    rule_name: str
    overlap_minutes: int


@dataclass(frozen=True)
class BreakCalculation:
    base_minutes: int
    net_minutes: int
    break_breakdown: tuple[BreakOverlap, ...] = field(default_factory=tuple)

    @property
    def break_minutes(self) -> int:
        return sum(b.overlap_minutes for b in self.break_breakdown)


EMPTY_CALCULATION = BreakCalculation(base_minutes=0, net_minutes=0)


def rule_window(rule: BreakRule) -> Optional[MinuteInterval]:
    """Minute-of-day window of a rule, or None when it cannot apply."""
    start = parse_hhmm(rule.start_time)
    end = parse_hhmm(rule.end_time)
    if start is None or end is None or start == end:
        return None
    return MinuteInterval(start, end)


def active_windows(rules: Iterable[BreakRule]) -> list[tuple[BreakRule, MinuteInterval]]:
    out = []
    for rule in rules:
        if not rule.is_active:
            continue
        window = rule_window(rule)
        if window is not None:
            out.append((rule, window))
    return out


class BreakOverlapCalculator(ABC):
    """Net worked minutes = wall-clock minutes minus overlapping break minutes.

    The worked span is projected onto the calendar day it starts on (spans of a
    day or more cover the whole day) and compared with each rule's daily window.
    The result never goes below zero and never exceeds the base minutes.
    """

    def calculate(self, *, start_minute: int, base_minutes: int, rules: Iterable[BreakRule]) -> BreakCalculation:
        base = max(0, int(base_minutes))
        if base == 0:
            return EMPTY_CALCULATION

        span = span_from(start_minute, base)
        breakdown = tuple(b for b in self._breakdown(span, active_windows(rules)) if b.overlap_minutes > 0)
        net = max(0, base - sum(b.overlap_minutes for b in breakdown))
        return BreakCalculation(base_minutes=base, net_minutes=net, break_breakdown=breakdown)

    def calculate_segment(
        self,
        *,
        start: datetime,
        end: Optional[datetime],
        rules: Iterable[BreakRule],
        tz: tzinfo,
    ) -> BreakCalculation:
        """Work segment given as timestamps; an open segment counts zero."""
        if end is None:
            return EMPTY_CALCULATION
        local_start = to_local(start, tz).replace(second=0, microsecond=0)
        local_end = to_local(end, tz).replace(second=0, microsecond=0)
        base = int((local_end - local_start).total_seconds() // 60)
        return self.calculate(start_minute=minute_of_day(local_start), base_minutes=base, rules=rules)

    def calculate_clock_times(
        self,
        clock_in: Optional[str],
        clock_out: Optional[str],
        rules: Iterable[BreakRule],
    ) -> BreakCalculation:
        """Attendance span on one day; a clock-out before clock-in clamps to zero."""
        in_min = parse_hhmm(clock_in)
        out_min = parse_hhmm(clock_out)
        if in_min is None or out_min is None:
            return EMPTY_CALCULATION
        return self.calculate(start_minute=in_min, base_minutes=out_min - in_min, rules=rules)

    @abstractmethod
    def _breakdown(
        self,
        span: MinuteInterval,
        windows: Sequence[tuple[BreakRule, MinuteInterval]],
    ) -> list[BreakOverlap]:
        raise NotImplementedError


class SummedBreakOverlapCalculator(BreakOverlapCalculator):
    """Each rule is subtracted on its own.

    Two active rules that overlap each other are both subtracted for the shared
    minutes. Administrators keep break rules disjoint.
    """

    def _breakdown(self, span, windows):
        return [BreakOverlap(rule.name, overlap_minutes(span, window)) for rule, window in windows]


class MergedBreakOverlapCalculator(BreakOverlapCalculator):
    """Rules are unioned first; a shared minute is credited to the earlier rule."""

    def _breakdown(self, span, windows):
        claimed: list[MinuteInterval] = []
        out = []
        for rule, window in sorted(windows, key=lambda rw: (rw[1].start, rw[0].name)):
            hit = intersect(clamp_to_day(span), window)
            fresh = total_length(hit) - total_length(intersect(hit, claimed))
            claimed = merge_intervals(claimed + hit)
            out.append(BreakOverlap(rule.name, fresh))
        return out


def build_calculator(mode: BreakOverlapMode | str = BreakOverlapMode.SUM) -> BreakOverlapCalculator:
    if BreakOverlapMode(mode) == BreakOverlapMode.MERGE:
        return MergedBreakOverlapCalculator()
    return SummedBreakOverlapCalculator()
