"""Minute-of-day interval arithmetic.

Intervals are half-open ``[start, end)`` offsets from local midnight. An interval
whose end is before its start crosses midnight, ``(0, 1440)`` is the whole day and
``start == end`` is empty. Every function here is pure and total: malformed input
is folded into that representation instead of being rejected.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..core.constants import MINUTES_PER_DAY


@dataclass(frozen=True)
class MinuteInterval:
    start: int
    end: int

    @property
    def crosses_midnight(self) -> bool:
        return self.end < self.start

    @property
    def length(self) -> int:
        if self.end >= self.start:
            return self.end - self.start
        return self.end + MINUTES_PER_DAY - self.start


FULL_DAY = MinuteInterval(0, MINUTES_PER_DAY)


def normalize(start: int, end: int) -> MinuteInterval:
    if end - start >= MINUTES_PER_DAY:
        return FULL_DAY
    s = int(start) % MINUTES_PER_DAY
    e = int(end) % MINUTES_PER_DAY
    if e == 0 and end != start:
        # Ending exactly at midnight.
        e = MINUTES_PER_DAY
    return MinuteInterval(s, e)


def wrapped_duration(start: int, end: int) -> int:
    """Length of ``start -> end`` where an earlier end means the next day."""
    return normalize(start, end).length if start != end else 0


def span_from(start_minute: int, length: int) -> MinuteInterval:
    """Project a span of ``length`` minutes starting at ``start_minute`` onto one day."""
    if length <= 0:
        s = int(start_minute) % MINUTES_PER_DAY
        return MinuteInterval(s, s)
    if length >= MINUTES_PER_DAY:
        return FULL_DAY
    return normalize(start_minute, start_minute + length)


def clamp_to_day(interval: MinuteInterval) -> list[MinuteInterval]:
    """Split into same-day pieces (one, or two when crossing midnight)."""
    start = max(0, min(MINUTES_PER_DAY, interval.start))
    end = max(0, min(MINUTES_PER_DAY, interval.end))
    if end >= start:
        return [MinuteInterval(start, end)] if end > start else []

    pieces = []
    if start < MINUTES_PER_DAY:
        pieces.append(MinuteInterval(start, MINUTES_PER_DAY))
    if end > 0:
        pieces.append(MinuteInterval(0, end))
    return pieces


def _pieces(value: MinuteInterval | Iterable[MinuteInterval]) -> list[MinuteInterval]:
    if isinstance(value, MinuteInterval):
        return clamp_to_day(value)
    out: list[MinuteInterval] = []
    for item in value:
        out.extend(clamp_to_day(item))
    return out


def intersect(
    a: MinuteInterval | Iterable[MinuteInterval],
    b: MinuteInterval | Iterable[MinuteInterval],
) -> list[MinuteInterval]:
    out = []
    for pa in _pieces(a):
        for pb in _pieces(b):
            lo = max(pa.start, pb.start)
            hi = min(pa.end, pb.end)
            if hi > lo:
                out.append(MinuteInterval(lo, hi))
    return out


def overlap_minutes(a: MinuteInterval, b: MinuteInterval) -> int:
    """Minutes shared by ``a`` and ``b``; 0 when disjoint."""
    return sum(piece.length for piece in intersect(a, b))


def merge_intervals(intervals: Sequence[MinuteInterval]) -> list[MinuteInterval]:
    """Disjoint, sorted union of the same-day pieces of ``intervals``."""
    merged: list[MinuteInterval] = []
    for piece in sorted(_pieces(intervals), key=lambda p: (p.start, p.end)):
        if merged and piece.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = MinuteInterval(last.start, max(last.end, piece.end))
        else:
            merged.append(piece)
    return merged


def total_length(intervals: Iterable[MinuteInterval]) -> int:
    return sum(piece.length for piece in merge_intervals(list(intervals)))
