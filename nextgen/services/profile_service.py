from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from nextgen.db import education as education_db
from nextgen.db import experience as experience_db
from nextgen.db import skills as skills_db
from nextgen.db import users as users_db
from nextgen.db.connection import transaction
from nextgen.services.errors import InvalidRequestError, NotFoundError
from nextgen.services.formatting import iso_date, parse_date

logger = logging.getLogger(__name__)

_YEAR = re.compile(r"^\s*(\d{4})")


def _year_of(value: str | None) -> int | None:
    """Leading four-digit year within (1900, 2100), else None."""
    if not value:
        return None
    match = _YEAR.match(value)
    if not match:
        return None
    year = int(match.group(1))
    if 1900 < year < 2100:
        return year
    return None


def _clean_date(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == "null":
        return None
    return text


def _shape_education(row: dict[str, Any]) -> dict[str, Any]:
    end = parse_date(row.get("end_date"))
    return {
        "id": row["education_id"],
        "degree": row.get("degree_title"),
        "institution": row.get("institution_name"),
        "start_date": iso_date(row.get("start_date")),
        "end_date": iso_date(row.get("end_date")),
        "year": str(end.year) if end else "Present",
    }


def _shape_experience(row: dict[str, Any]) -> dict[str, Any]:
    start = parse_date(row.get("start_date"))
    end = parse_date(row.get("end_date"))
    duration = ""
    if start:
        duration = f"{start.year} - {end.year if end else 'Present'}"
    return {
        "id": row["experience_id"],
        "title": row.get("job_title"),
        "company": row.get("company_name"),
        "start_date": iso_date(row.get("start_date")),
        "end_date": iso_date(row.get("end_date")),
        "is_current": bool(row.get("is_current")),
        "duration": duration,
        "description": row.get("description"),
    }


def get_profile(user_id: str) -> dict[str, Any]:
    user = users_db.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    education = education_db.list_education(user_id)
    experience = experience_db.list_experience(user_id)
    skills = skills_db.list_user_skill_names(user_id)

    current = next((row for row in experience if row.get("is_current")), None)

    return {
        "id": user["user_id"],
        "user_id": user["user_id"],
        "first_name": user.get("first_name"),
        "last_name": user.get("last_name"),
        "email": user.get("email"),
        "phone_number": user.get("phone_number"),
        "date_of_birth": iso_date(user.get("date_of_birth")),
        "current_city": user.get("current_city"),
        "bio": user.get("bio"),
        "linkedin_url": user.get("linkedin_url"),
        "github_url": user.get("github_url"),
        "profile_picture": user.get("profile_picture_url"),
        "account_status": user.get("account_status"),
        "current_job": current["job_title"] if current else "",
        "dream_job": user.get("dream_job"),
        "years_of_experience": user.get("years_of_experience"),
        "preferred_location": user.get("preferred_location"),
        "salary_expectation": user.get("salary_expectation"),
        "education": [_shape_education(row) for row in education],
        "work_experience": [_shape_experience(row) for row in experience],
        "skills": skills,
    }


def education_from_entry(entry: dict[str, Any]) -> dict[str, Any] | None:
    """Map a profile-form education entry to a row; entries without degree and institution are dropped."""
    degree = entry.get("degree")
    institution = entry.get("institution")
    if not degree and not institution:
        return None

    start_date = _clean_date(entry.get("start_date"))
    end_date = _clean_date(entry.get("end_date"))
    year = entry.get("year")
    if not end_date and year is not None and str(year).strip().lower() != "present":
        parsed = _year_of(str(year))
        if parsed:
            end_date = f"{parsed}-12-31"

    return {
        "degree_title": degree or "",
        "institution_name": institution or "",
        "start_date": start_date,
        "end_date": end_date,
        "is_current": False,
    }


def experience_from_entry(entry: dict[str, Any]) -> dict[str, Any] | None:
    """Map a profile-form experience entry to a row; a ``duration`` like "2019 - Present" fills missing dates."""
    title = entry.get("title")
    company = entry.get("company")
    if not title and not company:
        return None

    start_date = _clean_date(entry.get("start_date"))
    end_date = _clean_date(entry.get("end_date"))
    is_current = bool(entry.get("is_current"))

    duration = entry.get("duration")
    if not start_date and duration:
        parts = [part.strip() for part in str(duration).split("-")]
        if parts and parts[0] and parts[0].lower() != "present":
            year = _year_of(parts[0])
            if year:
                start_date = f"{year}-01-01"
        if len(parts) > 1 and parts[1]:
            if parts[1].lower() == "present":
                is_current = True
            else:
                year = _year_of(parts[1])
                if year:
                    end_date = f"{year}-01-01"

    return {
        "job_title": title or "",
        "company_name": company or "",
        "start_date": start_date,
        "end_date": end_date,
        "is_current": is_current,
        "description": entry.get("description") or "",
    }


def replace_profile(user_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Overwrite basic info and replace education/experience rows in one transaction."""
    fields = {key: (value if value != "" else None) for key, value in payload.items()}
    fields["profile_picture_url"] = fields.get("profile_picture")
    fields["current_job_title"] = fields.get("current_job")

    education_rows = [row for row in map(education_from_entry, payload.get("education") or []) if row]
    experience_rows = [row for row in map(experience_from_entry, payload.get("work_experience") or []) if row]

    with transaction():
        user = users_db.replace_user_profile(user_id, fields)
        if user is None:
            raise NotFoundError("User not found")

        education_db.delete_all_education(user_id)
        for row in education_rows:
            education_db.insert_education(user_id, row)

        experience_db.delete_all_experience(user_id)
        for row in experience_rows:
            experience_db.insert_experience(user_id, row)

    logger.info(
        "profile_replaced user_id=%s education=%s experience=%s",
        user_id,
        len(education_rows),
        len(experience_rows),
    )
    return user


def replace_skills(
    user_id: str,
    names: Iterable[str],
    *,
    proficiency_level: str = "intermediate",
    source: str = "manual_entry",
) -> int:
    """Clear the user's skills and link each name, creating catalog entries as needed.

    Callers that need atomicity wrap this in ``transaction()``.
    """
    skills_db.delete_all_user_skills(user_id)
    linked = 0
    seen: set[str] = set()
    for raw in names:
        name = (raw or "").strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        skill = skills_db.find_or_create_skill(name)
        if skills_db.insert_user_skill_if_absent(
            user_id,
            skill["skill_id"],
            proficiency_level=proficiency_level,
            source=source,
        ):
            linked += 1
    return linked


def update_skill_names(user_id: str, names: Iterable[str]) -> int:
    if not users_db.user_exists(user_id):
        raise NotFoundError("User not found")
    with transaction():
        return replace_skills(user_id, names)


def _require_user(user_id: str) -> None:
    if not users_db.user_exists(user_id):
        raise NotFoundError("User not found")


def add_education(user_id: str, record: dict[str, Any]) -> dict[str, Any]:
    _require_user(user_id)
    return education_db.insert_education(user_id, record)


def edit_education(user_id: str, education_id: int, record: dict[str, Any]) -> dict[str, Any]:
    updated = education_db.update_education(user_id, education_id, record)
    if updated is None:
        raise NotFoundError("Education record not found")
    return updated


def remove_education(user_id: str, education_id: int) -> None:
    if not education_db.delete_education(user_id, education_id):
        raise NotFoundError("Education record not found")


def add_experience(user_id: str, record: dict[str, Any]) -> dict[str, Any]:
    _require_user(user_id)
    return experience_db.insert_experience(user_id, record)


def edit_experience(user_id: str, experience_id: int, record: dict[str, Any]) -> dict[str, Any]:
    updated = experience_db.update_experience(user_id, experience_id, record)
    if updated is None:
        raise NotFoundError("Work experience record not found")
    return updated


def remove_experience(user_id: str, experience_id: int) -> None:
    if not experience_db.delete_experience(user_id, experience_id):
        raise NotFoundError("Work experience record not found")


def add_user_skill(
    user_id: str,
    skill_name: str,
    *,
    proficiency_level: str,
    years_of_experience: float = 0,
) -> dict[str, Any]:
    _require_user(user_id)
    name = (skill_name or "").strip()
    if not name:
        raise InvalidRequestError("Skill name is required")
    skill = skills_db.find_or_create_skill(name)
    if skills_db.user_has_skill(user_id, skill["skill_id"]):
        raise InvalidRequestError("User already has this skill")
    row = skills_db.insert_user_skill(
        user_id,
        skill["skill_id"],
        proficiency_level=proficiency_level,
        years_of_experience=years_of_experience,
    )
    return {**row, "skill_name": skill["skill_name"]}


def edit_user_skill(
    user_id: str,
    user_skill_id: int,
    *,
    proficiency_level: str | None,
    years_of_experience: float | None,
) -> dict[str, Any]:
    updated = skills_db.update_user_skill(
        user_id,
        user_skill_id,
        proficiency_level=proficiency_level,
        years_of_experience=years_of_experience,
    )
    if updated is None:
        raise NotFoundError("Skill not found")
    return updated


def remove_user_skill(user_id: str, user_skill_id: int) -> None:
    if not skills_db.delete_user_skill(user_id, user_skill_id):
        raise NotFoundError("Skill not found")
