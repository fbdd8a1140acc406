from __future__ import annotations

from typing import Any

from nextgen.db.connection import encode_json, execute, fetch_all, fetch_one, utc_now

_LIST_COLUMNS = (
    "resume_id, user_id, file_name, file_path, file_type, file_size, "
    "parsing_status, upload_date, is_active"
)


def insert_resume(
    user_id: str,
    *,
    file_name: str,
    file_path: str,
    file_type: str,
    file_size: int,
) -> dict[str, Any]:
    cursor = execute(
        """
        INSERT INTO resumes (user_id, file_name, file_path, file_type, file_size, parsing_status, upload_date)
        VALUES (?, ?, ?, ?, ?, 'pending', ?)
        """,
        (user_id, file_name, file_path, file_type, file_size, utc_now()),
    )
    return get_resume(int(cursor.lastrowid)) or {}


def get_resume(resume_id: int) -> dict[str, Any] | None:
    return fetch_one("SELECT * FROM resumes WHERE resume_id = ?", (resume_id,))


def list_resumes(user_id: str) -> list[dict[str, Any]]:
    return fetch_all(
        f"""
        SELECT {_LIST_COLUMNS}
        FROM resumes
        WHERE user_id = ? AND is_active = 1
        ORDER BY upload_date DESC, resume_id DESC
        """,
        (user_id,),
    )


def mark_parsed(resume_id: int, parsed_data: dict[str, Any], parsed_text: str) -> None:
    execute(
        """
        UPDATE resumes
        SET parsing_status = 'completed', parsed_data = ?, parsed_text = ?
        WHERE resume_id = ?
        """,
        (encode_json(parsed_data), parsed_text, resume_id),
    )


def mark_status(resume_id: int, status: str) -> None:
    execute("UPDATE resumes SET parsing_status = ? WHERE resume_id = ?", (status, resume_id))
