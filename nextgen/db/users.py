from __future__ import annotations

import uuid
from typing import Any

from nextgen.db.connection import execute, fetch_one, utc_now

PUBLIC_COLUMNS = (
    "user_id, email, first_name, last_name, phone_number, date_of_birth, current_city, bio, "
    "linkedin_url, github_url, profile_picture_url, account_status, two_factor_enabled, "
    "current_job_title, dream_job, years_of_experience, preferred_location, salary_expectation, "
    "created_at, updated_at"
)


def get_user(user_id: str) -> dict[str, Any] | None:
    return fetch_one(f"SELECT {PUBLIC_COLUMNS} FROM users WHERE user_id = ?", (user_id,))


def get_user_with_password(email: str) -> dict[str, Any] | None:
    return fetch_one("SELECT * FROM users WHERE email = ?", (email,))


def user_exists(user_id: str) -> bool:
    return fetch_one("SELECT 1 AS found FROM users WHERE user_id = ?", (user_id,)) is not None


def email_taken(email: str) -> bool:
    return fetch_one("SELECT 1 AS found FROM users WHERE email = ?", (email,)) is not None


def create_user(*, email: str, password_hash: str, first_name: str, last_name: str) -> dict[str, Any]:
    user_id = str(uuid.uuid4())
    now = utc_now()
    execute(
        """
        INSERT INTO users (user_id, email, password_hash, first_name, last_name, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (user_id, email, password_hash, first_name, last_name, now, now),
    )
    return get_user(user_id) or {}


def replace_user_profile(user_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Overwrite the editable profile columns; absent values become NULL."""
    cursor = execute(
        """
        UPDATE users
        SET first_name = ?, last_name = ?, phone_number = ?,
            date_of_birth = ?, current_city = ?, bio = ?,
            linkedin_url = ?, github_url = ?, profile_picture_url = ?,
            current_job_title = ?, dream_job = ?, years_of_experience = ?,
            preferred_location = ?, salary_expectation = ?,
            updated_at = ?
        WHERE user_id = ?
        """,
        (
            fields.get("first_name"),
            fields.get("last_name"),
            fields.get("phone_number"),
            fields.get("date_of_birth"),
            fields.get("current_city"),
            fields.get("bio"),
            fields.get("linkedin_url"),
            fields.get("github_url"),
            fields.get("profile_picture_url"),
            fields.get("current_job_title"),
            fields.get("dream_job"),
            fields.get("years_of_experience"),
            fields.get("preferred_location"),
            fields.get("salary_expectation"),
            utc_now(),
            user_id,
        ),
    )
    if cursor.rowcount == 0:
        return None
    return get_user(user_id)


_PATCHABLE = (
    "first_name",
    "last_name",
    "phone_number",
    "date_of_birth",
    "current_city",
    "bio",
    "linkedin_url",
    "github_url",
    "profile_picture_url",
)


def patch_user(user_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """COALESCE update: only non-null values replace stored ones."""
    assignments = ", ".join(f"{column} = COALESCE(?, {column})" for column in _PATCHABLE)
    params = [fields.get(column) for column in _PATCHABLE]
    cursor = execute(
        f"UPDATE users SET {assignments}, updated_at = ? WHERE user_id = ?",
        (*params, utc_now(), user_id),
    )
    if cursor.rowcount == 0:
        return None
    return get_user(user_id)


def set_two_factor(email: str, enabled: bool) -> int:
    cursor = execute(
        "UPDATE users SET two_factor_enabled = ?, updated_at = ? WHERE email = ?",
        (1 if enabled else 0, utc_now(), email),
    )
    return int(cursor.rowcount or 0)


def count_users() -> int:
    row = fetch_one("SELECT COUNT(*) AS total FROM users")
    return int(row["total"]) if row else 0
