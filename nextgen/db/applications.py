from __future__ import annotations

from typing import Any

from nextgen.db.connection import execute, fetch_all, fetch_one, utc_now

APPLICATION_STATUSES = ("applied", "screening", "interview", "offer", "rejected", "withdrawn")
CLOSED_STATUSES = ("rejected", "withdrawn")


def list_applications(user_id: str, limit: int | None = None) -> list[dict[str, Any]]:
    """Applications with the title/organisation resolved from the job or opportunity."""
    sql = """
        SELECT a.application_id, a.application_type, a.entity_id, a.status, a.notes, a.applied_date,
               COALESCE(j.job_title, o.title) AS title,
               COALESCE(j.company_name, o.organization_name) AS organization
        FROM applications a
        LEFT JOIN job_postings j
               ON a.application_type = 'job' AND a.entity_id = j.job_id
        LEFT JOIN opportunities o
               ON a.application_type <> 'job' AND a.entity_id = o.opportunity_id
        WHERE a.user_id = ?
        ORDER BY a.applied_date DESC, a.application_id DESC
    """
    params: tuple[Any, ...] = (user_id,)
    if limit is not None:
        sql += " LIMIT ?"
        params = (user_id, limit)
    return fetch_all(sql, params)


def get_application(user_id: str, application_id: int) -> dict[str, Any] | None:
    return fetch_one(
        "SELECT * FROM applications WHERE application_id = ? AND user_id = ?",
        (application_id, user_id),
    )


def has_applied(user_id: str, application_type: str, entity_id: int) -> bool:
    row = fetch_one(
        """
        SELECT 1 AS found FROM applications
        WHERE user_id = ? AND application_type = ? AND entity_id = ?
        """,
        (user_id, application_type, entity_id),
    )
    return row is not None


def insert_application(
    user_id: str,
    entity_id: int,
    *,
    application_type: str = "job",
    notes: str | None = None,
) -> dict[str, Any]:
    cursor = execute(
        """
        INSERT INTO applications (user_id, application_type, entity_id, status, notes, applied_date)
        VALUES (?, ?, ?, 'applied', ?, ?)
        """,
        (user_id, application_type, entity_id, notes, utc_now()),
    )
    return get_application(user_id, int(cursor.lastrowid)) or {}


def update_status(user_id: str, application_id: int, status: str) -> dict[str, Any] | None:
    cursor = execute(
        "UPDATE applications SET status = ? WHERE application_id = ? AND user_id = ?",
        (status, application_id, user_id),
    )
    if cursor.rowcount == 0:
        return None
    return get_application(user_id, application_id)


def count_active(user_id: str) -> int:
    row = fetch_one(
        """
        SELECT COUNT(*) AS total FROM applications
        WHERE user_id = ? AND status NOT IN (?, ?)
        """,
        (user_id, *CLOSED_STATUSES),
    )
    return int(row["total"]) if row else 0


def count_with_status(user_id: str, status: str) -> int:
    row = fetch_one(
        "SELECT COUNT(*) AS total FROM applications WHERE user_id = ? AND status = ?",
        (user_id, status),
    )
    return int(row["total"]) if row else 0
