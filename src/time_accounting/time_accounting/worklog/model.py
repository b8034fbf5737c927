from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class WorkSegment:
    """A contiguous interval of task work logged against a job and process."""

    segment_id: int
    user_id: int
    job_id: int
    process_id: int
    start_time: datetime
    end_time: Optional[datetime]
    description: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None
