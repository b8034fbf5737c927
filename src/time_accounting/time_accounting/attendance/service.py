from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Optional

from ..breaks.repository import BreakRuleRepository
from ..common.datetime_utils import format_hhmm, minute_of_day, now_local, parse_hhmm, to_local
from ..common.validators import require_hhmm
from ..core.constants import DEFAULT_CLOCK_IN, DEFAULT_CLOCK_OUT
from ..core.enums import SUPERVISOR_ROLES, Role
from ..core.exceptions import AuthorizationError, NotFoundError, StoreUnavailableError, ValidationError
from ..timecalc.break_overlap import BreakOverlapCalculator
from ..users.repository import UserRepository
from .model import AttendanceRecord, RecalculationResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def normalize_work_times(clock_in: Optional[str], clock_out: Optional[str]) -> tuple[str, str]:
    """Order two same-day clock times so the earlier one is the clock-in.

    A missing side takes the value of the other one; when both are missing the
    standard 08:30-17:30 day is assumed.
    """
    in_min = parse_hhmm(clock_in)
    out_min = parse_hhmm(clock_out)

    if in_min is None and out_min is None:
        in_min = parse_hhmm(DEFAULT_CLOCK_IN)
        out_min = parse_hhmm(DEFAULT_CLOCK_OUT)
    if in_min is None:
        in_min = out_min
    if out_min is None:
        out_min = in_min

    return format_hhmm(min(in_min, out_min)), format_hhmm(max(in_min, out_min))


class AttendanceService:
    """Clock-in/clock-out actions and administrator corrections."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        break_rules: BreakRuleRepository,
        calculator: BreakOverlapCalculator,
        *,
        tz: tzinfo,
    ):
        self._attendance = attendance
        self._users = users
        self._break_rules = break_rules
        self._calculator = calculator
        self._tz = tz

    def net_minutes(self, clock_in_time: str, clock_out_time: str) -> int:
        """Attendance minutes net of the currently active break rules."""
        rules = self._break_rules.list_active()
        return self._calculator.calculate_clock_times(clock_in_time, clock_out_time, rules).net_minutes

    def clock_in(self, user_id: int, *, now: datetime | None = None, device: str = "pc") -> AttendanceRecord:
        now = self._local(now)
        today = now.date()
        self._require_user(user_id)

        if self._attendance.get_for_user_and_date(user_id, today):
            raise ValidationError("Already clocked in today")

        clock_in_time = format_hhmm(minute_of_day(now))
        attendance_id = self._attendance.create_clock_in(
            user_id=user_id,
            work_date=today,
            clock_in_time=clock_in_time,
            device=device,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=today,
            clock_in_time=clock_in_time,
            clock_out_time=None,
            clock_in_device=device,
        )

    def clock_out(self, user_id: int, *, now: datetime | None = None, device: str = "pc") -> AttendanceRecord:
        now = self._local(now)
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            raise ValidationError("No clock-in record for today")
        if not record.is_open:
            raise ValidationError("Already clocked out")

        clock_in_time, clock_out_time = normalize_work_times(record.clock_in_time, format_hhmm(minute_of_day(now)))
        work_minutes = self.net_minutes(clock_in_time, clock_out_time)

        closed = self._attendance.close_if_open(
            attendance_id=record.attendance_id,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            work_minutes=work_minutes,
            device=device,
        )
        if not closed:
            raise ValidationError("Already clocked out")

        return AttendanceRecord(
            attendance_id=record.attendance_id,
            user_id=record.user_id,
            work_date=record.work_date,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            work_minutes=work_minutes,
            clock_in_device=record.clock_in_device,
            clock_out_device=device,
        )

    def update_record(
        self,
        *,
        current_role: Role,
        attendance_id: int,
        clock_in_time: Optional[str] = None,
        clock_out_time: Optional[str] = None,
    ) -> AttendanceRecord:
        """Administrator edit.

        ``None`` keeps the stored value, an empty string clears it. Clearing the
        clock-out re-opens the session. Races with the auto-close sweep are
        resolved by whichever write lands last.
        """
        if current_role not in SUPERVISOR_ROLES:
            raise AuthorizationError("Only supervisors can edit attendance")

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        new_in = record.clock_in_time if clock_in_time is None else (clock_in_time.strip() or None)
        new_out = record.clock_out_time if clock_out_time is None else (clock_out_time.strip() or None)
        if new_in is not None:
            require_hhmm(new_in, "Clock-in")
        if new_out is not None:
            require_hhmm(new_out, "Clock-out")

        work_minutes: Optional[int]
        if new_out is None:
            final_in = new_in or record.clock_in_time
            final_out = None
            work_minutes = None
        else:
            final_in, final_out = normalize_work_times(new_in, new_out)
            work_minutes = self.net_minutes(final_in, final_out)

        self._attendance.update_times(
            attendance_id=record.attendance_id,
            clock_in_time=final_in,
            clock_out_time=final_out,
            work_minutes=work_minutes,
        )
        logger.info(
            "attendance %s edited: %s-%s -> %s-%s",
            record.attendance_id,
            record.clock_in_time,
            record.clock_out_time or "open",
            final_in,
            final_out or "open",
        )
        return AttendanceRecord(
            attendance_id=record.attendance_id,
            user_id=record.user_id,
            work_date=record.work_date,
            clock_in_time=final_in,
            clock_out_time=final_out,
            work_minutes=work_minutes,
            clock_in_device=record.clock_in_device,
            clock_out_device=record.clock_out_device,
        )

    def recalculate_all_work_minutes(self, *, current_role: Role) -> RecalculationResult:
        """Re-derive cached minutes of every closed record with the current rules."""
        if current_role not in SUPERVISOR_ROLES:
            raise AuthorizationError("Only supervisors can recalculate attendance")

        records = self._attendance.list_closed()
        rules = self._break_rules.list_active()
        updated = 0
        errors = 0

        for record in records:
            try:
                clock_in_time, clock_out_time = normalize_work_times(record.clock_in_time, record.clock_out_time)
                minutes = self._calculator.calculate_clock_times(clock_in_time, clock_out_time, rules).net_minutes
                if record.work_minutes != minutes:
                    self._attendance.update_work_minutes(attendance_id=record.attendance_id, work_minutes=minutes)
                    updated += 1
            except StoreUnavailableError:
                raise
            except Exception:
                errors += 1
                logger.exception("recalculation failed for attendance %s", record.attendance_id)

        logger.info("recalculated work minutes: total=%s updated=%s errors=%s", len(records), updated, errors)
        return RecalculationResult(total=len(records), updated=updated, errors=errors)

    def _require_user(self, user_id: int) -> None:
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

    def _local(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now else now_local(self._tz)
