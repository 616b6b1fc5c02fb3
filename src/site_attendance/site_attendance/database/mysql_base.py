from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import mysql.connector

from ..common.datetime_utils import as_utc
from ..core.exceptions import StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back and raise StorageError on driver errors."""
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StorageError(f"database unavailable: {exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise StorageError(str(exc)) from exc
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


def normalize_mysql_datetime(value: Any) -> Optional[datetime]:
    """Normalize DATETIME values to aware UTC.

    mysql-connector can return DATETIME as:
    - datetime.datetime (naive, stored as UTC)
    - string (e.g. '2025-03-03 12:40:00' or ISO with offset)
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return as_utc(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return as_utc(datetime.fromisoformat(text))

    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")


def to_mysql_datetime(instant: datetime) -> datetime:
    """Aware instant -> naive UTC for DATETIME columns."""
    return as_utc(instant).replace(tzinfo=None)
