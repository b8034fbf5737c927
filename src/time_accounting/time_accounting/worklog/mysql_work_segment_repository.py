from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from ..common.datetime_utils import as_aware
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import WorkSegment
from .repository import WorkSegmentRepository


def _utc_naive(value: datetime) -> datetime:
    return as_aware(value).astimezone(timezone.utc).replace(tzinfo=None)


class MySQLWorkSegmentRepository(WorkSegmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_started_between(self, *, user_id: int, start: datetime, end: datetime) -> Sequence[WorkSegment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT segment_id, user_id, job_id, process_id, start_time, end_time, description
                FROM work_segments
                WHERE user_id=%s AND start_time >= %s AND start_time < %s
                ORDER BY start_time, segment_id
                """,
                (int(user_id), _utc_naive(start), _utc_naive(end)),
            )
            return [
                WorkSegment(
                    segment_id=int(r["segment_id"]),
                    user_id=int(r["user_id"]),
                    job_id=int(r["job_id"]),
                    process_id=int(r["process_id"]),
                    start_time=as_aware(r["start_time"]),
                    end_time=as_aware(r["end_time"]) if r.get("end_time") else None,
                    description=r.get("description"),
                )
                for r in fetchall(cur)
            ]
