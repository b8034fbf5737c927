from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceState


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance session per user per calendar day.

    Clock times are "HH:MM" in the operating timezone. ``work_minutes`` is cached
    at clock-out, net of the break rules active at that moment.
    """

    attendance_id: int
    user_id: int
    work_date: date
    clock_in_time: str
    clock_out_time: Optional[str]
    work_minutes: Optional[int] = None
    clock_in_device: Optional[str] = None
    clock_out_device: Optional[str] = None

    @property
    def state(self) -> AttendanceState:
        return AttendanceState.OPEN if self.clock_out_time is None else AttendanceState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state == AttendanceState.OPEN


@dataclass(frozen=True)
class RecalculationResult:
    total: int
    updated: int
    errors: int
