from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import WorkSegment


class WorkSegmentRepository(Protocol):
    def list_started_between(self, *, user_id: int, start: datetime, end: datetime) -> Sequence[WorkSegment]:
        """Segments of the user whose start lies in ``[start, end)``, oldest first."""

        raise NotImplementedError
