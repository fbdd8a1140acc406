from __future__ import annotations

import uuid
from typing import Any

from nextgen.db.connection import encode_json, execute, fetch_one, utc_now

_COLUMNS = "session_id, user_id, messages, started_at, last_message_at, is_active"


def get_latest_active_session(user_id: str) -> dict[str, Any] | None:
    return fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM chat_sessions
        WHERE user_id = ? AND is_active = 1
        ORDER BY last_message_at DESC
        LIMIT 1
        """,
        (user_id,),
    )


def get_session(user_id: str, session_id: str) -> dict[str, Any] | None:
    return fetch_one(
        f"SELECT {_COLUMNS} FROM chat_sessions WHERE session_id = ? AND user_id = ? AND is_active = 1",
        (session_id, user_id),
    )


def create_session(user_id: str, messages: list[dict[str, Any]]) -> dict[str, Any]:
    session_id = str(uuid.uuid4())
    now = utc_now()
    execute(
        """
        INSERT INTO chat_sessions (session_id, user_id, messages, started_at, last_message_at, is_active)
        VALUES (?, ?, ?, ?, ?, 1)
        """,
        (session_id, user_id, encode_json(messages), now, now),
    )
    return get_session(user_id, session_id) or {}


def save_messages(user_id: str, session_id: str, messages: list[dict[str, Any]]) -> dict[str, Any] | None:
    cursor = execute(
        """
        UPDATE chat_sessions
        SET messages = ?, last_message_at = ?
        WHERE session_id = ? AND user_id = ?
        """,
        (encode_json(messages), utc_now(), session_id, user_id),
    )
    if cursor.rowcount == 0:
        return None
    return get_session(user_id, session_id)


def deactivate_session(user_id: str, session_id: str) -> bool:
    cursor = execute(
        "UPDATE chat_sessions SET is_active = 0 WHERE session_id = ? AND user_id = ?",
        (session_id, user_id),
    )
    return cursor.rowcount > 0
