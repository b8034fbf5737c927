from __future__ import annotations

from datetime import date, tzinfo
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..breaks.model import BreakRule
from ..breaks.repository import BreakRuleRepository
from ..common.datetime_utils import day_bounds
from ..core.exceptions import NotFoundError
from ..timecalc.break_overlap import BreakOverlapCalculator
from ..users.repository import UserRepository
from ..worklog.repository import WorkSegmentRepository
from .model import DailySummary, SegmentBreakdown


class DailySummaryService:
    """Work-minutes aggregation for a user-day.

    Read only: recomputed on every call from the current records and the
    currently active break rules, for past days as well as today.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        segments: WorkSegmentRepository,
        break_rules: BreakRuleRepository,
        users: UserRepository,
        calculator: BreakOverlapCalculator,
        *,
        tz: tzinfo,
    ):
        self._attendance = attendance
        self._segments = segments
        self._break_rules = break_rules
        self._users = users
        self._calculator = calculator
        self._tz = tz

    def compute_daily_summary(self, user_id: int, work_date: date) -> DailySummary:
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

        rules = self._break_rules.list_active()
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        return self.build_summary(user_id, work_date, attendance=record, rules=rules)

    def build_summary(
        self,
        user_id: int,
        work_date: date,
        *,
        attendance: Optional[AttendanceRecord],
        rules: Sequence[BreakRule],
    ) -> DailySummary:
        """Summary from an already loaded attendance record and rule set."""
        start, end = day_bounds(work_date, self._tz)
        breakdowns = []
        for seg in self._segments.list_started_between(user_id=user_id, start=start, end=end):
            calc = self._calculator.calculate_segment(start=seg.start_time, end=seg.end_time, rules=rules, tz=self._tz)
            breakdowns.append(
                SegmentBreakdown(
                    segment_id=seg.segment_id,
                    start_time=seg.start_time,
                    end_time=seg.end_time,
                    base_minutes=calc.base_minutes,
                    net_minutes=calc.net_minutes,
                    break_breakdown=calc.break_breakdown,
                )
            )

        return DailySummary(
            user_id=user_id,
            work_date=work_date,
            attendance_minutes=self._attendance_minutes(attendance, rules),
            work_minutes=sum(b.net_minutes for b in breakdowns),
            segments=tuple(breakdowns),
            has_attendance=attendance is not None,
            attendance_open=attendance is not None and attendance.is_open,
        )

    def _attendance_minutes(self, record: Optional[AttendanceRecord], rules: Sequence[BreakRule]) -> int:
        if record is None or record.is_open:
            return 0
        if record.work_minutes is not None:
            return max(0, int(record.work_minutes))
        return self._calculator.calculate_clock_times(record.clock_in_time, record.clock_out_time, rules).net_minutes
