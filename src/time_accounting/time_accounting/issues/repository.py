from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import IssueClear


class IssueClearRepository(Protocol):
    def get_for_user_and_date(self, *, user_id: int, work_date: date) -> Optional[IssueClear]:
        raise NotImplementedError

    def create(self, *, user_id: int, work_date: date, cleared_by: int, cleared_at: datetime) -> int:
        """Insert a clear; returns 0 when one already exists for the user-day."""

        raise NotImplementedError

    def list_cleared_since(self, since: datetime) -> Sequence[IssueClear]:
        raise NotImplementedError

    def list_all(self) -> Sequence[IssueClear]:
        """Newest first."""

        raise NotImplementedError

    def delete_older_than(self, cutoff: datetime) -> int:
        raise NotImplementedError

    def delete(self, clear_id: int) -> bool:
        raise NotImplementedError
