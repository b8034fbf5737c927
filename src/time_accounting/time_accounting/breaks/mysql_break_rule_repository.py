from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import BreakRule
from .repository import BreakRuleRepository

_COLUMNS = "break_rule_id, name, start_time, end_time, duration_minutes, is_active"


def _to_rule(r: dict) -> BreakRule:
    return BreakRule(
        break_rule_id=int(r["break_rule_id"]),
        name=r["name"],
        start_time=r["start_time"],
        end_time=r["end_time"],
        duration_minutes=int(r["duration_minutes"]),
        is_active=bool(r["is_active"]),
    )


class MySQLBreakRuleRepository(BreakRuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[BreakRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_rules ORDER BY start_time, break_rule_id")
            return [_to_rule(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[BreakRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_rules WHERE is_active=1 ORDER BY start_time, break_rule_id")
            return [_to_rule(r) for r in fetchall(cur)]

    def get_by_id(self, break_rule_id: int) -> Optional[BreakRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_rules WHERE break_rule_id=%s", (int(break_rule_id),))
            r = fetchone(cur)
            return _to_rule(r) if r else None

    def create(self, *, name: str, start_time: str, end_time: str, duration_minutes: int, is_active: bool = True) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO break_rules(name, start_time, end_time, duration_minutes, is_active)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, start_time, end_time, int(duration_minutes), 1 if is_active else 0),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        break_rule_id: int,
        name: str,
        start_time: str,
        end_time: str,
        duration_minutes: int,
        is_active: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE break_rules
                SET name=%s, start_time=%s, end_time=%s, duration_minutes=%s, is_active=%s
                WHERE break_rule_id=%s
                """,
                (name, start_time, end_time, int(duration_minutes), 1 if is_active else 0, int(break_rule_id)),
            )
            return cur.rowcount > 0
