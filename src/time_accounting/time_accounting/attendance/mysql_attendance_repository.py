from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, clock_in_time, clock_out_time,
    work_minutes, clock_in_device, clock_out_device
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in_time=r["clock_in_time"],
        clock_out_time=r.get("clock_out_time"),
        work_minutes=None if r.get("work_minutes") is None else int(r["work_minutes"]),
        clock_in_device=r.get("clock_in_device"),
        clock_out_device=r.get("clock_out_device"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_dates(self, work_dates: Iterable[date]) -> Sequence[AttendanceRecord]:
        dates = sorted(set(work_dates))
        if not dates:
            return []
        placeholders = ",".join(["%s"] * len(dates))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date IN ({placeholders}) AND clock_in_time IS NOT NULL
                ORDER BY work_date DESC, user_id ASC
                """,
                tuple(dates),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s AND clock_out_time IS NULL
                ORDER BY attendance_id
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_closed(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE clock_in_time IS NOT NULL AND clock_out_time IS NOT NULL
                ORDER BY attendance_id
                """
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in_time: str, device: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, clock_in_time, clock_in_device)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), work_date, clock_in_time, device),
            )
            return int(cur.lastrowid)

    def close_if_open(
        self,
        *,
        attendance_id: int,
        clock_in_time: str,
        clock_out_time: str,
        work_minutes: int,
        device: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in_time=%s, clock_out_time=%s, work_minutes=%s, clock_out_device=%s
                WHERE attendance_id=%s AND clock_out_time IS NULL
                """,
                (clock_in_time, clock_out_time, int(work_minutes), device, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_times(
        self,
        *,
        attendance_id: int,
        clock_in_time: str,
        clock_out_time: Optional[str],
        work_minutes: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in_time=%s, clock_out_time=%s, work_minutes=%s
                WHERE attendance_id=%s
                """,
                (clock_in_time, clock_out_time, work_minutes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_work_minutes(self, *, attendance_id: int, work_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET work_minutes=%s WHERE attendance_id=%s",
                (int(work_minutes), int(attendance_id)),
            )
            return cur.rowcount > 0
