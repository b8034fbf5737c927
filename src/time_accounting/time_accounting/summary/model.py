from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..timecalc.break_overlap import BreakOverlap


@dataclass(frozen=True)
class SegmentBreakdown:
    segment_id: int
    start_time: datetime
    end_time: Optional[datetime]
    base_minutes: int
    net_minutes: int
    break_breakdown: tuple[BreakOverlap, ...] = field(default_factory=tuple)

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class DailySummary:
    """Attendance vs. reported work for one user-day. Derived, never stored."""

    user_id: int
    work_date: date
    attendance_minutes: int
    work_minutes: int
    segments: tuple[SegmentBreakdown, ...] = field(default_factory=tuple)
    has_attendance: bool = False
    attendance_open: bool = False

    @property
    def difference_minutes(self) -> int:
        return self.work_minutes - self.attendance_minutes

    @property
    def open_segments(self) -> int:
        return sum(1 for s in self.segments if s.is_open)
