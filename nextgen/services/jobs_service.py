from __future__ import annotations

from typing import Any

from nextgen.db import jobs as jobs_db
from nextgen.db import skills as skills_db
from nextgen.services.errors import NotFoundError
from nextgen.services.formatting import format_job_type, format_posted_date, format_salary, split_csv
from nextgen.services.matching import as_percent, skill_match_score


def _shape_job(job: dict[str, Any], user_skills: list[str] | None) -> dict[str, Any]:
    match_score = None
    if user_skills is not None:
        match_score = as_percent(skill_match_score(user_skills, job.get("required_skills")))
    return {
        "id": job["job_id"],
        "title": job["job_title"],
        "company": job["company_name"],
        "location": job.get("job_location"),
        "salary": format_salary(job.get("salary_min"), job.get("salary_max")),
        "type": format_job_type(job.get("job_type")),
        "matchScore": match_score,
        "description": job.get("job_description"),
        "skills": job.get("required_skills") or [],
        "posted": format_posted_date(job.get("posted_date")),
    }


def _skills_for(user_id: str | None) -> list[str] | None:
    if not user_id:
        return None
    return skills_db.list_user_skill_names(user_id)


def list_jobs(
    *,
    search: str | None = None,
    job_type: str | None = None,
    location: str | None = None,
    user_id: str | None = None,
) -> list[dict[str, Any]]:
    rows = jobs_db.list_jobs(
        search=(search or "").strip() or None,
        job_types=split_csv(job_type),
        locations=split_csv(location),
    )
    user_skills = _skills_for(user_id)
    return [_shape_job(row, user_skills) for row in rows]


def get_job(job_id: int, *, user_id: str | None = None) -> dict[str, Any]:
    job = jobs_db.get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    shaped = _shape_job(job, _skills_for(user_id))
    shaped["fullDetails"] = job
    return shaped
