from __future__ import annotations

from typing import Any

from nextgen.db.connection import execute, fetch_all, fetch_one, utc_now

_COLUMNS = (
    "experience_id, job_title, company_name, employment_type, "
    "start_date, end_date, is_current, description"
)


def list_experience(user_id: str, limit: int | None = None) -> list[dict[str, Any]]:
    sql = f"""
        SELECT {_COLUMNS}
        FROM work_experience
        WHERE user_id = ?
        ORDER BY start_date DESC
    """
    params: tuple[Any, ...] = (user_id,)
    if limit is not None:
        sql += " LIMIT ?"
        params = (user_id, limit)
    return fetch_all(sql, params)


def get_experience(experience_id: int) -> dict[str, Any] | None:
    return fetch_one("SELECT * FROM work_experience WHERE experience_id = ?", (experience_id,))


def insert_experience(user_id: str, record: dict[str, Any]) -> dict[str, Any]:
    cursor = execute(
        """
        INSERT INTO work_experience (
            user_id, job_title, company_name, employment_type,
            start_date, end_date, is_current, description, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            record.get("job_title"),
            record.get("company_name"),
            record.get("employment_type"),
            record.get("start_date"),
            record.get("end_date"),
            1 if record.get("is_current") else 0,
            record.get("description"),
            utc_now(),
        ),
    )
    return get_experience(int(cursor.lastrowid)) or {}


def update_experience(user_id: str, experience_id: int, record: dict[str, Any]) -> dict[str, Any] | None:
    is_current = record.get("is_current")
    cursor = execute(
        """
        UPDATE work_experience
        SET job_title = COALESCE(?, job_title),
            company_name = COALESCE(?, company_name),
            employment_type = COALESCE(?, employment_type),
            start_date = COALESCE(?, start_date),
            end_date = ?,
            is_current = COALESCE(?, is_current),
            description = ?
        WHERE experience_id = ? AND user_id = ?
        """,
        (
            record.get("job_title"),
            record.get("company_name"),
            record.get("employment_type"),
            record.get("start_date"),
            record.get("end_date"),
            None if is_current is None else (1 if is_current else 0),
            record.get("description"),
            experience_id,
            user_id,
        ),
    )
    if cursor.rowcount == 0:
        return None
    return get_experience(experience_id)


def delete_experience(user_id: str, experience_id: int) -> bool:
    cursor = execute(
        "DELETE FROM work_experience WHERE experience_id = ? AND user_id = ?",
        (experience_id, user_id),
    )
    return cursor.rowcount > 0


def delete_all_experience(user_id: str) -> int:
    cursor = execute("DELETE FROM work_experience WHERE user_id = ?", (user_id,))
    return int(cursor.rowcount or 0)
