from __future__ import annotations

from contextlib import contextmanager, suppress
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

# Connector errors that mean "database not reachable right now".
_TRANSIENT_ERRORS = (
    mysql.connector.errors.InterfaceError,
    mysql.connector.errors.OperationalError,
    mysql.connector.errors.PoolError,
)


def _connect(conn_factory: DatabaseConnection):
    try:
        return conn_factory.connect()
    except _TRANSIENT_ERRORS as e:
        raise StoreUnavailableError(f"database unavailable: {e}") from e


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = _connect(conn_factory)
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except _TRANSIENT_ERRORS as e:
        with suppress(mysql.connector.Error):
            conn.rollback()
        raise StoreUnavailableError(f"database unavailable: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
