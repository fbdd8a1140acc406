from __future__ import annotations

import logging
import sqlite3
from typing import Any

from nextgen.db import applications as applications_db
from nextgen.db import jobs as jobs_db
from nextgen.db import users as users_db
from nextgen.services.errors import ConflictError, InvalidRequestError, NotFoundError

logger = logging.getLogger(__name__)


def shape_application(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["application_id"],
        "entityId": row["entity_id"],
        "type": row["application_type"],
        "title": row.get("title"),
        "organization": row.get("organization"),
        "status": row["status"],
        "notes": row.get("notes"),
        "appliedDate": row["applied_date"],
    }


def list_applications(user_id: str) -> list[dict[str, Any]]:
    return [shape_application(row) for row in applications_db.list_applications(user_id)]


def apply_to_job(user_id: str, job_id: int, notes: str | None = None) -> dict[str, Any]:
    if not users_db.user_exists(user_id):
        raise NotFoundError("User not found")
    job = jobs_db.get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if applications_db.has_applied(user_id, "job", job_id):
        raise ConflictError("Already applied to this job")
    try:
        row = applications_db.insert_application(user_id, job_id, notes=notes)
    except sqlite3.IntegrityError as exc:
        raise ConflictError("Already applied to this job") from exc
    logger.info("application_created user_id=%s job_id=%s", user_id, job_id)
    return shape_application({**row, "title": job["job_title"], "organization": job["company_name"]})


def change_status(user_id: str, application_id: int, status: str) -> dict[str, Any]:
    if status not in applications_db.APPLICATION_STATUSES:
        allowed = ", ".join(applications_db.APPLICATION_STATUSES)
        raise InvalidRequestError(f"status must be one of: {allowed}")
    row = applications_db.update_status(user_id, application_id, status)
    if row is None:
        raise NotFoundError("Application not found")
    return shape_application(row)
