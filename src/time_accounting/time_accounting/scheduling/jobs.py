from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Optional

from apscheduler.schedulers.base import BaseScheduler

from ..common.datetime_utils import minute_of_day, now_local, parse_hhmm, to_local
from ..core.constants import AUTO_CLOSE_CATCHUP_DAYS, AUTO_CLOSE_FALLBACK_SECONDS, RETENTION_SWEEP_SECONDS
from ..core.exceptions import StoreUnavailableError
from ..issues.service import IssueService
from .auto_close import AutoCloseDaemon

logger = logging.getLogger(__name__)

AUTO_CLOSE_JOB_ID = "auto-close"
FALLBACK_JOB_ID = "auto-close-fallback"
RETENTION_JOB_ID = "issue-clear-retention"


class BackgroundJobs:
    """Day-end auto-close and issue-clear retention on an APScheduler scheduler.

    Each job is a one-shot ``date`` job that schedules its successor once it has
    finished, so runs of the same job never overlap.
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        daemon: AutoCloseDaemon,
        issues: IssueService,
        *,
        tz: tzinfo,
        fallback_seconds: int = AUTO_CLOSE_FALLBACK_SECONDS,
        retention_seconds: int = RETENTION_SWEEP_SECONDS,
        catchup_days: int = AUTO_CLOSE_CATCHUP_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._scheduler = scheduler
        self._daemon = daemon
        self._issues = issues
        self._tz = tz
        self._fallback = timedelta(seconds=int(fallback_seconds))
        self._retention = timedelta(seconds=int(retention_seconds))
        self._catchup_days = int(catchup_days)
        self._clock = clock or (lambda: now_local(tz))
        self._close_minute = parse_hhmm(daemon.close_time)
        self._running = False

    def start(self) -> None:
        self._running = True
        if self._catchup_days > 0:
            self._guarded("auto-close catch-up", lambda: self._daemon.catch_up(self._catchup_days, now=self._now()))
        self._guarded("issue-clear retention", lambda: self._issues.purge_expired_clears(now=self._now()))

        now = self._now()
        self._schedule(AUTO_CLOSE_JOB_ID, self.run_auto_close_tick, self.next_close_at(now))
        self._schedule(FALLBACK_JOB_ID, self.run_fallback_tick, now + self._fallback)
        self._schedule(RETENTION_JOB_ID, self.run_retention_tick, now + self._retention)
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("background jobs started; next auto-close at %s", self.next_close_at(now).isoformat())

    def shutdown(self) -> None:
        self._running = False
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def next_close_at(self, now: datetime) -> datetime:
        """Next wall-clock moment of the day-end close, strictly after ``now``."""
        local = to_local(now, self._tz)
        at = local.replace(hour=self._close_minute // 60, minute=self._close_minute % 60, second=0, microsecond=0)
        if at <= local:
            at = at + timedelta(days=1)
        return at

    def run_auto_close_tick(self) -> None:
        try:
            self._guarded("auto-close", lambda: self._daemon.sweep(now=self._now()))
        finally:
            self._schedule(AUTO_CLOSE_JOB_ID, self.run_auto_close_tick, self.next_close_at(self._now()))

    def run_fallback_tick(self) -> None:
        """Covers a missed precise trigger.

        At or after the close time it sweeps today; before it, it closes whatever
        earlier days left open, so a day whose close failed is retried on the next tick.
        """
        try:
            now = self._now()
            if minute_of_day(now) >= self._close_minute:
                self._guarded("auto-close fallback", lambda: self._daemon.sweep(now=now))
            elif self._catchup_days > 0:
                self._guarded("auto-close catch-up", lambda: self._daemon.catch_up(self._catchup_days, now=now))
        finally:
            self._schedule(FALLBACK_JOB_ID, self.run_fallback_tick, self._now() + self._fallback)

    def run_retention_tick(self) -> None:
        try:
            self._guarded("issue-clear retention", lambda: self._issues.purge_expired_clears(now=self._now()))
        finally:
            self._schedule(RETENTION_JOB_ID, self.run_retention_tick, self._now() + self._retention)

    def _guarded(self, name: str, func: Callable[[], object]) -> None:
        try:
            func()
        except StoreUnavailableError as e:
            logger.warning("%s skipped, store unavailable: %s", name, e)
        except Exception:
            logger.exception("%s failed", name)

    def _schedule(self, job_id: str, func: Callable[[], None], run_date: datetime) -> None:
        if not self._running:
            return
        self._scheduler.add_job(func, "date", run_date=run_date, id=job_id, replace_existing=True)

    def _now(self) -> datetime:
        return to_local(self._clock(), self._tz)
