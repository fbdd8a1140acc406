"""Record-level endpoints used by the resume review flow.

The client clears a user's records and re-posts them one at a time, so these
helpers apply the storage defaults the date and enum columns need.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from nextgen.db import education as education_db
from nextgen.db import experience as experience_db
from nextgen.db import skills as skills_db
from nextgen.db import users as users_db
from nextgen.db.connection import today_iso
from nextgen.services.errors import InvalidRequestError, NotFoundError

_USER_FIELDS = ("first_name", "last_name", "phone_number", "current_city", "linkedin_url", "github_url")


def update_user(user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    changes = {key: fields.get(key) for key in _USER_FIELDS}
    user = users_db.patch_user(user_id, changes)
    if user is None:
        raise NotFoundError("User not found")
    return {
        "user_id": user["user_id"],
        "email": user["email"],
        **{key: user.get(key) for key in _USER_FIELDS},
    }


def clear_education(user_id: str) -> int:
    return education_db.delete_all_education(user_id)


def create_education(record: dict[str, Any]) -> dict[str, Any]:
    user_id = record.get("user_id")
    if not user_id or not record.get("degree_title") or not record.get("institution_name"):
        raise InvalidRequestError("user_id, degree_title, and institution_name are required")
    today = today_iso()
    row = {
        **record,
        "degree_type": record.get("degree_type") or "bachelors",
        "start_date": record.get("start_date") or today,
        "end_date": record.get("end_date") or today,
    }
    try:
        return education_db.insert_education(user_id, row)
    except sqlite3.IntegrityError as exc:
        raise NotFoundError("User not found") from exc


def clear_experience(user_id: str) -> int:
    return experience_db.delete_all_experience(user_id)


def create_experience(record: dict[str, Any]) -> dict[str, Any]:
    user_id = record.get("user_id")
    if not user_id or not record.get("job_title") or not record.get("company_name") or not record.get("start_date"):
        raise InvalidRequestError("user_id, job_title, company_name, and start_date are required")
    end_date = record.get("end_date")
    if record.get("is_current") or not end_date or end_date == "null":
        end_date = today_iso()
    row = {
        **record,
        "employment_type": record.get("employment_type") or "full_time",
        "end_date": end_date,
    }
    try:
        return experience_db.insert_experience(user_id, row)
    except sqlite3.IntegrityError as exc:
        raise NotFoundError("User not found") from exc


def clear_user_skills(user_id: str) -> int:
    return skills_db.delete_all_user_skills(user_id)


def link_user_skill(record: dict[str, Any]) -> dict[str, Any] | None:
    """Returns None when the user already has the skill."""
    user_id = record.get("user_id")
    skill_id = record.get("skill_id")
    if not user_id or not skill_id:
        raise InvalidRequestError("user_id and skill_id are required")
    try:
        return skills_db.insert_user_skill_if_absent(
            user_id,
            int(skill_id),
            proficiency_level=record.get("proficiency_level") or "intermediate",
            years_of_experience=record.get("years_of_experience") or 0,
            source=record.get("source") or "manual_entry",
        )
    except sqlite3.IntegrityError as exc:
        raise NotFoundError("User or skill not found") from exc


def search_catalog(name: str | None, query: str | None) -> dict[str, Any] | list[dict[str, Any]]:
    if name:
        skill = skills_db.find_skill_by_name(name)
        if skill is None:
            raise NotFoundError("Skill not found")
        return skill
    if query:
        return skills_db.search_catalog(query)
    raise InvalidRequestError("name query parameter is required")


def ensure_catalog_skill(name: str | None, category: str | None) -> tuple[dict[str, Any], bool]:
    """Return ``(skill, created)``."""
    skill_name = (name or "").strip()
    if not skill_name:
        raise InvalidRequestError("skill_name is required")
    existing = skills_db.find_skill_by_name(skill_name)
    if existing is not None:
        return existing, False
    try:
        return skills_db.create_skill(skill_name, category or "technical"), True
    except sqlite3.IntegrityError:
        return skills_db.find_skill_by_name(skill_name) or {}, False
