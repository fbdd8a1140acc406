from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Iterator, Sequence

from nextgen.core.config import settings
from nextgen.db.schema import BOOL_COLUMNS, INDEXES, JSON_COLUMNS, TABLE_NAMES, TABLES

logger = logging.getLogger(__name__)

_conn: sqlite3.Connection | None = None
_conn_lock = threading.RLock()


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    return date.today().isoformat()


def _get_connection() -> sqlite3.Connection:
    global _conn
    with _conn_lock:
        if _conn is not None:
            return _conn

        db_path = settings.database_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        _conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        _conn.row_factory = sqlite3.Row
        _conn.execute("PRAGMA journal_mode=WAL;")
        _conn.execute("PRAGMA synchronous=NORMAL;")
        _conn.execute("PRAGMA busy_timeout=5000;")
        _conn.execute("PRAGMA foreign_keys=ON;")
        for statement in TABLES:
            _conn.execute(statement)
        for statement in INDEXES:
            _conn.execute(statement)
        logger.info("database_ready path=%s", db_path)
        return _conn


def init_db() -> None:
    _get_connection()


def close_db() -> None:
    global _conn
    with _conn_lock:
        if _conn is not None:
            _conn.close()
            _conn = None


def _decode(column: str, value: Any) -> Any:
    if column in BOOL_COLUMNS and value is not None:
        return bool(value)
    if column in JSON_COLUMNS and isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def row_to_dict(row: sqlite3.Row | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {key: _decode(key, row[key]) for key in row.keys()}


def encode_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def fetch_all(sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
    conn = _get_connection()
    with _conn_lock:
        rows = conn.execute(sql, tuple(params)).fetchall()
    return [row_to_dict(row) for row in rows]


def fetch_one(sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
    conn = _get_connection()
    with _conn_lock:
        row = conn.execute(sql, tuple(params)).fetchone()
    return row_to_dict(row)


def fetch_value(sql: str, params: Sequence[Any] = ()) -> Any:
    conn = _get_connection()
    with _conn_lock:
        row = conn.execute(sql, tuple(params)).fetchone()
    return row[0] if row is not None else None


def execute(sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
    conn = _get_connection()
    with _conn_lock:
        return conn.execute(sql, tuple(params))


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements atomically.

    The connection lock is held for the whole block, so helpers called from the
    same thread join the open transaction instead of auto-committing.
    """
    conn = _get_connection()
    with _conn_lock:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        else:
            conn.execute("COMMIT")


def clear_all_tables() -> None:
    conn = _get_connection()
    with _conn_lock:
        for table in TABLE_NAMES:
            conn.execute(f"DELETE FROM {table}")
        conn.execute("DELETE FROM sqlite_sequence")
