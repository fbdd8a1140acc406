from __future__ import annotations

from typing import Any

from nextgen.db.connection import execute, fetch_one, utc_now


def invalidate_pending(email: str, purpose: str) -> int:
    cursor = execute(
        "UPDATE otp_codes SET consumed = 1 WHERE email = ? AND purpose = ? AND consumed = 0",
        (email, purpose),
    )
    return int(cursor.rowcount or 0)


def insert_code(email: str, purpose: str, code_hash: str, expires_at: str) -> int:
    cursor = execute(
        """
        INSERT INTO otp_codes (email, purpose, code_hash, attempts, consumed, expires_at, created_at)
        VALUES (?, ?, ?, 0, 0, ?, ?)
        """,
        (email, purpose, code_hash, expires_at, utc_now()),
    )
    return int(cursor.lastrowid)


def get_pending(email: str, purpose: str) -> dict[str, Any] | None:
    return fetch_one(
        """
        SELECT otp_id, email, purpose, code_hash, attempts, consumed, expires_at
        FROM otp_codes
        WHERE email = ? AND purpose = ? AND consumed = 0
        ORDER BY otp_id DESC
        LIMIT 1
        """,
        (email, purpose),
    )


def record_failed_attempt(otp_id: int) -> None:
    execute("UPDATE otp_codes SET attempts = attempts + 1 WHERE otp_id = ?", (otp_id,))


def consume(otp_id: int) -> None:
    execute("UPDATE otp_codes SET consumed = 1 WHERE otp_id = ?", (otp_id,))


def purge_expired(now_iso: str) -> int:
    cursor = execute("DELETE FROM otp_codes WHERE expires_at < ? OR consumed = 1", (now_iso,))
    return int(cursor.rowcount or 0)
