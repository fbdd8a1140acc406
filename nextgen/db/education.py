from __future__ import annotations

from typing import Any

from nextgen.db.connection import execute, fetch_all, fetch_one, utc_now

_COLUMNS = (
    "education_id, degree_type, degree_title, institution_name, field_of_study, "
    "start_date, end_date, is_current, grade_cgpa"
)


def list_education(user_id: str) -> list[dict[str, Any]]:
    return fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM education
        WHERE user_id = ?
        ORDER BY start_date DESC
        """,
        (user_id,),
    )


def get_education(education_id: int) -> dict[str, Any] | None:
    return fetch_one("SELECT * FROM education WHERE education_id = ?", (education_id,))


def insert_education(user_id: str, record: dict[str, Any]) -> dict[str, Any]:
    cursor = execute(
        """
        INSERT INTO education (
            user_id, degree_type, degree_title, institution_name, field_of_study,
            start_date, end_date, is_current, grade_cgpa, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            record.get("degree_type"),
            record.get("degree_title"),
            record.get("institution_name"),
            record.get("field_of_study"),
            record.get("start_date"),
            record.get("end_date"),
            1 if record.get("is_current") else 0,
            record.get("grade_cgpa"),
            utc_now(),
        ),
    )
    return get_education(int(cursor.lastrowid)) or {}


def update_education(user_id: str, education_id: int, record: dict[str, Any]) -> dict[str, Any] | None:
    is_current = record.get("is_current")
    cursor = execute(
        """
        UPDATE education
        SET degree_type = COALESCE(?, degree_type),
            degree_title = COALESCE(?, degree_title),
            institution_name = COALESCE(?, institution_name),
            field_of_study = COALESCE(?, field_of_study),
            start_date = COALESCE(?, start_date),
            end_date = ?,
            is_current = COALESCE(?, is_current),
            grade_cgpa = ?
        WHERE education_id = ? AND user_id = ?
        """,
        (
            record.get("degree_type"),
            record.get("degree_title"),
            record.get("institution_name"),
            record.get("field_of_study"),
            record.get("start_date"),
            record.get("end_date"),
            None if is_current is None else (1 if is_current else 0),
            record.get("grade_cgpa"),
            education_id,
            user_id,
        ),
    )
    if cursor.rowcount == 0:
        return None
    return get_education(education_id)


def delete_education(user_id: str, education_id: int) -> bool:
    cursor = execute(
        "DELETE FROM education WHERE education_id = ? AND user_id = ?",
        (education_id, user_id),
    )
    return cursor.rowcount > 0


def delete_all_education(user_id: str) -> int:
    cursor = execute("DELETE FROM education WHERE user_id = ?", (user_id,))
    return int(cursor.rowcount or 0)
