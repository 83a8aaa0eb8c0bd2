from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errors as mysql_errors

from ..core.exceptions import StorageError
from .connection import DatabaseConnection, is_unavailable

DUPLICATE_KEY_ERRNO = 1062


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql_errors.Error as e:
        if is_unavailable(e):
            raise StorageError(f"Database unreachable: {e}") from e
        raise

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception as e:
        _safe_rollback(conn)
        if is_unavailable(e):
            raise StorageError(f"Database error: {e}") from e
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    # A dropped connection cannot roll back; the server discards the transaction.
    try:
        conn.rollback()
    except mysql_errors.Error:
        pass


def is_duplicate_key(error: Exception) -> bool:
    return isinstance(error, mysql_errors.IntegrityError) and getattr(error, "errno", None) == DUPLICATE_KEY_ERRNO


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
