from __future__ import annotations

from src.time_accounting.time_accounting.core.enums import Role
from src.time_accounting.time_accounting.users.mysql_user_repository import MySQLUserRepository


class RowsCursor:
    def __init__(self, rows):
        self.rows = rows

    def execute(self, sql, params=None):
        pass

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class RowsConnection:
    def __init__(self, rows):
        self.rows = rows

    def cursor(self, dictionary=True):
        return RowsCursor(self.rows)

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class RowsFactory:
    def __init__(self, rows):
        self.rows = rows

    def connect(self):
        return RowsConnection(self.rows)


ROWS = [
    {"user_id": 1, "username": "sato", "name": "Sato", "role": "field_worker"},
    {"user_id": 2, "username": "old", "name": None, "role": "driver"},
]


def test_get_many_skips_unknown_roles():
    users = MySQLUserRepository(RowsFactory(ROWS)).get_many([1, 2])

    assert [(u.user_id, u.role) for u in users] == [(1, Role.FIELD_WORKER)]


def test_get_by_id_with_unknown_role_is_missing():
    assert MySQLUserRepository(RowsFactory(ROWS[1:])).get_by_id(2) is None
