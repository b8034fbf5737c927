from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..breaks.repository import BreakRuleRepository
from ..common.datetime_utils import now_local, to_local
from ..core.constants import ISSUE_CLEAR_RETENTION_DAYS, ISSUE_LOOKBACK_DAYS
from ..core.enums import ISSUE_EXEMPT_ROLES, SUPERVISOR_ROLES, DiscrepancyKind
from ..core.exceptions import AuthorizationError, NotFoundError, StoreUnavailableError
from ..summary.service import DailySummaryService
from ..users.repository import UserRepository
from .detector import DiscrepancyClassifier
from .model import IssueClear, PendingIssue
from .repository import IssueClearRepository

logger = logging.getLogger(__name__)


class IssueService:
    """Pending discrepancy list and the supervised clear workflow.

    A clear hides its user-day from the pending list for the retention period
    (7 days by default) and is purged afterwards.
    """

    def __init__(
        self,
        clears: IssueClearRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        break_rules: BreakRuleRepository,
        summaries: DailySummaryService,
        classifier: DiscrepancyClassifier,
        *,
        tz: tzinfo,
        lookback_days: int = ISSUE_LOOKBACK_DAYS,
        retention_days: int = ISSUE_CLEAR_RETENTION_DAYS,
    ):
        self._clears = clears
        self._attendance = attendance
        self._users = users
        self._break_rules = break_rules
        self._summaries = summaries
        self._classifier = classifier
        self._tz = tz
        self._lookback_days = int(lookback_days)
        self._retention = timedelta(days=int(retention_days))

    def clear_issue(self, user_id: int, work_date: date, actor_id: int, *, now: datetime | None = None) -> IssueClear:
        """Record that ``actor_id`` reviewed the user-day.

        Repeating it while the clear is live is a no-op; an expired clear is replaced.
        """
        self._require_supervisor(actor_id)
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

        cleared_at = self._now(now)
        existing = self._clears.get_for_user_and_date(user_id=user_id, work_date=work_date)
        if existing:
            if existing.cleared_at > cleared_at - self._retention:
                return existing
            # Expired but not purged yet
            self._clears.delete(existing.clear_id)

        clear_id = self._clears.create(user_id=user_id, work_date=work_date, cleared_by=actor_id, cleared_at=cleared_at)
        if not clear_id:
            # Lost a race with another supervisor; theirs stands.
            existing = self._clears.get_for_user_and_date(user_id=user_id, work_date=work_date)
            if existing:
                return existing

        logger.info("issue cleared: user=%s date=%s by=%s", user_id, work_date, actor_id)
        return IssueClear(
            clear_id=clear_id,
            user_id=user_id,
            work_date=work_date,
            cleared_by=actor_id,
            cleared_at=cleared_at,
        )

    def is_cleared(self, user_id: int, work_date: date, *, now: datetime | None = None) -> bool:
        """True while a clear for the user-day is younger than the retention period."""
        clear = self._clears.get_for_user_and_date(user_id=user_id, work_date=work_date)
        return clear is not None and clear.cleared_at > self._now(now) - self._retention

    def list_clears(self, actor_id: int) -> Sequence[IssueClear]:
        self._require_supervisor(actor_id)
        return self._clears.list_all()

    def list_pending_issues(
        self,
        *,
        today: Optional[date] = None,
        lookback_days: Optional[int] = None,
        now: datetime | None = None,
    ) -> list[PendingIssue]:
        """Discrepancies on the days before ``today``, newest day first.

        Administrators and sales office staff are never reported; user-days with
        a live clear are skipped.
        """
        now = self._now(now)
        today = today or now.date()
        days = self._lookback_days if lookback_days is None else max(0, int(lookback_days))
        dates = [today - timedelta(days=i) for i in range(1, days + 1)]
        if not dates:
            return []

        records = self._attendance.list_for_dates(dates)
        users = {u.user_id: u for u in self._users.get_many({r.user_id for r in records})}
        cleared = {(c.user_id, c.work_date) for c in self._clears.list_cleared_since(now - self._retention)}
        rules = self._break_rules.list_active()

        issues: list[PendingIssue] = []
        for record in records:
            user = users.get(record.user_id)
            if user is None or user.role in ISSUE_EXEMPT_ROLES:
                continue
            if (record.user_id, record.work_date) in cleared:
                continue

            try:
                summary = self._summaries.build_summary(record.user_id, record.work_date, attendance=record, rules=rules)
            except StoreUnavailableError:
                raise
            except Exception:
                logger.exception("summary failed for user=%s date=%s", record.user_id, record.work_date)
                continue

            kind = self._classifier.classify(summary)
            if kind == DiscrepancyKind.NONE:
                continue
            issues.append(
                PendingIssue(
                    user_id=record.user_id,
                    user_name=user.display_name,
                    work_date=record.work_date,
                    kind=kind,
                    difference_minutes=summary.difference_minutes,
                )
            )

        issues.sort(key=lambda i: (-i.work_date.toordinal(), i.user_id))
        return issues

    def purge_expired_clears(self, *, now: datetime | None = None) -> int:
        cutoff = self._now(now) - self._retention
        deleted = self._clears.delete_older_than(cutoff)
        if deleted:
            logger.info("purged %s issue clears older than %s", deleted, cutoff.isoformat())
        return deleted

    def _require_supervisor(self, actor_id: int) -> None:
        actor = self._users.get_by_id(actor_id)
        if not actor:
            raise NotFoundError("User not found")
        if actor.role not in SUPERVISOR_ROLES:
            raise AuthorizationError("Only supervisors can review discrepancies")

    def _now(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now else now_local(self._tz)
