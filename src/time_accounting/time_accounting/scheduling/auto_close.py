from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import normalize_work_times
from ..breaks.repository import BreakRuleRepository
from ..common.datetime_utils import now_local, to_local
from ..common.validators import require_hhmm
from ..core.constants import AUTO_CLOSE_DEVICE, AUTO_CLOSE_TIME
from ..timecalc.break_overlap import BreakOverlapCalculator

logger = logging.getLogger(__name__)


class AutoCloseDaemon:
    """Closes attendance sessions nobody clocked out of.

    Safe to run any number of times and from several triggers at once: each
    record is closed through a conditional update that only matches open rows.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        break_rules: BreakRuleRepository,
        calculator: BreakOverlapCalculator,
        *,
        tz: tzinfo,
        close_time: str = AUTO_CLOSE_TIME,
        device: str = AUTO_CLOSE_DEVICE,
    ):
        self._attendance = attendance
        self._break_rules = break_rules
        self._calculator = calculator
        self._tz = tz
        self._close_time = require_hhmm(close_time, "Auto-close time")
        self._device = device

    @property
    def close_time(self) -> str:
        return self._close_time

    def sweep(self, target_date: Optional[date] = None, *, now: datetime | None = None) -> int:
        """Close every open record of ``target_date`` (default: today). Returns how many were closed."""
        work_date = target_date or self._local(now).date()
        records = self._attendance.list_open_for_date(work_date)
        if not records:
            return 0

        rules = self._break_rules.list_active()
        closed = 0
        for record in records:
            clock_in_time, clock_out_time = normalize_work_times(record.clock_in_time, self._close_time)
            work_minutes = self._calculator.calculate_clock_times(clock_in_time, clock_out_time, rules).net_minutes
            if self._attendance.close_if_open(
                attendance_id=record.attendance_id,
                clock_in_time=clock_in_time,
                clock_out_time=clock_out_time,
                work_minutes=work_minutes,
                device=self._device,
            ):
                closed += 1
                logger.debug("auto-closed attendance %s (user=%s)", record.attendance_id, record.user_id)

        logger.info("auto-close %s: %s of %s open records closed", work_date.isoformat(), closed, len(records))
        return closed

    def catch_up(self, days: int, *, now: datetime | None = None) -> int:
        """Sweep the ``days`` dates before today, e.g. after the service was down over midnight."""
        today = self._local(now).date()
        return sum(self.sweep(today - timedelta(days=i)) for i in range(1, int(days) + 1))

    def _local(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now else now_local(self._tz)
