from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_dates(self, work_dates: Iterable[date]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_closed(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in_time: str, device: Optional[str]) -> int:
        raise NotImplementedError

    def close_if_open(
        self,
        *,
        attendance_id: int,
        clock_in_time: str,
        clock_out_time: str,
        work_minutes: int,
        device: Optional[str],
    ) -> bool:
        """Set the clock-out only while the record is still open.

        Returns False when another writer closed it first. This conditional update
        is what keeps concurrent closers from closing a record twice.
        """

        raise NotImplementedError

    def update_times(
        self,
        *,
        attendance_id: int,
        clock_in_time: str,
        clock_out_time: Optional[str],
        work_minutes: Optional[int],
    ) -> bool:
        """Unconditional administrator edit (last write wins)."""

        raise NotImplementedError

    def update_work_minutes(self, *, attendance_id: int, work_minutes: int) -> bool:
        raise NotImplementedError
