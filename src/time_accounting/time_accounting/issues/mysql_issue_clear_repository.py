from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Sequence

from ..common.datetime_utils import as_aware
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import IssueClear
from .repository import IssueClearRepository

_COLUMNS = "clear_id, user_id, work_date, cleared_by, cleared_at"


def _utc_naive(value: datetime) -> datetime:
    return as_aware(value).astimezone(timezone.utc).replace(tzinfo=None)


def _to_clear(r: dict) -> IssueClear:
    return IssueClear(
        clear_id=int(r["clear_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        cleared_by=int(r["cleared_by"]),
        cleared_at=as_aware(r["cleared_at"]),
    )


class MySQLIssueClearRepository(IssueClearRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, *, user_id: int, work_date: date) -> Optional[IssueClear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM issue_clears WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_clear(r) if r else None

    def create(self, *, user_id: int, work_date: date, cleared_by: int, cleared_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO issue_clears(user_id, work_date, cleared_by, cleared_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), work_date, int(cleared_by), _utc_naive(cleared_at)),
            )
            return int(cur.lastrowid or 0) if cur.rowcount > 0 else 0

    def list_cleared_since(self, since: datetime) -> Sequence[IssueClear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM issue_clears WHERE cleared_at > %s",
                (_utc_naive(since),),
            )
            return [_to_clear(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[IssueClear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM issue_clears ORDER BY cleared_at DESC, clear_id DESC")
            return [_to_clear(r) for r in fetchall(cur)]

    def delete_older_than(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM issue_clears WHERE cleared_at < %s", (_utc_naive(cutoff),))
            return int(cur.rowcount)

    def delete(self, clear_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM issue_clears WHERE clear_id=%s", (int(clear_id),))
            return cur.rowcount > 0
