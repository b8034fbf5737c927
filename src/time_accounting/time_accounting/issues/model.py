from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import DiscrepancyKind


@dataclass(frozen=True)
class IssueClear:
    """A supervisor's acknowledgement of a user-day discrepancy. Never updated."""

    clear_id: int
    user_id: int
    work_date: date
    cleared_by: int
    cleared_at: datetime


@dataclass(frozen=True)
class PendingIssue:
    user_id: int
    user_name: str
    work_date: date
    kind: DiscrepancyKind
    difference_minutes: int
