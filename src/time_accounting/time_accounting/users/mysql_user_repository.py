from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _to_user(row: dict) -> Optional[User]:
    try:
        role = Role(row["role"])
    except ValueError:
        # Roles this service does not know are treated as missing users
        logger.warning("user %s has unknown role %r", row.get("user_id"), row.get("role"))
        return None
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        name=row.get("name"),
        role=role,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id, username, name, role FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_many(self, user_ids: Iterable[int]) -> Sequence[User]:
        ids = sorted({int(u) for u in user_ids})
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT user_id, username, name, role FROM users WHERE user_id IN ({placeholders})",
                tuple(ids),
            )
            users = [_to_user(r) for r in fetchall(cur)]
            return [u for u in users if u is not None]
