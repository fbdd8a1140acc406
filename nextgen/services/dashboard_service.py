"""Dashboard aggregation: profile strength, recommendations and activity summaries."""

from __future__ import annotations

import math
from typing import Any

from nextgen.db import applications as applications_db
from nextgen.db import ats as ats_db
from nextgen.db import dashboard as dashboard_db
from nextgen.db import education as education_db
from nextgen.db import experience as experience_db
from nextgen.db import jobs as jobs_db
from nextgen.db import skills as skills_db
from nextgen.db import users as users_db
from nextgen.services.applications_service import shape_application
from nextgen.services.ats_service import shape_report
from nextgen.services.errors import NotFoundError
from nextgen.services.formatting import format_salary_range, full_name
from nextgen.services.matching import as_percent, skill_match_score

RECOMMENDATION_LIMIT = 10
GAP_LIMIT = 10
APPLICATION_LIMIT = 10


def profile_strength(
    user: dict[str, Any],
    education_count: int,
    experience: list[dict[str, Any]],
    skills_count: int,
) -> int:
    score = 0
    for column in ("first_name", "last_name", "email", "phone_number", "bio", "profile_picture_url"):
        if user.get(column):
            score += 5
    if education_count > 0:
        score += 20
    if experience:
        score += 15
    if any(row.get("is_current") for row in experience):
        score += 15
    if skills_count > 0:
        score += 10
    if skills_count >= 5:
        score += 10
    return min(score, 100)


def profile_breakdown(
    user: dict[str, Any],
    education_count: int,
    experience_count: int,
    skills_count: int,
) -> dict[str, float]:
    weights = (
        ("first_name", 7.5),
        ("last_name", 7.5),
        ("email", 5),
        ("phone_number", 5),
        ("bio", 2.5),
        ("profile_picture_url", 2.5),
    )
    basic = sum(weight for column, weight in weights if user.get(column))
    return {
        "basicInfo": basic,
        "education": 25 if education_count > 0 else 0,
        "experience": 25 if experience_count > 0 else 0,
        "skills": min(20, skills_count / 5 * 20) if skills_count > 0 else 0,
    }


def match_ranking(strength: int) -> str:
    return f"Top {math.ceil(strength / 100 * 20)}%"


def _required_skills_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, str):
        return value
    return ""


def _shape_recommended(job: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": job.get("job_id"),
        "title": job.get("job_title"),
        "company": job.get("company_name"),
        "location": job.get("job_location") or "Remote",
        "jobType": job.get("job_type") or "full_time",
        "salary": format_salary_range(job.get("salary_min"), job.get("salary_max")),
        "description": job.get("job_description"),
        "requiredSkills": _required_skills_text(job.get("required_skills")),
        "matchScore": as_percent(job.get("match_score") or None),
    }


def recommended_jobs(user_id: str, user_skills: list[str]) -> list[dict[str, Any]]:
    """Stored recommendations first; otherwise score the newest postings by skill overlap."""
    stored = jobs_db.list_job_recommendations(user_id, RECOMMENDATION_LIMIT)
    if stored:
        return [_shape_recommended(row) for row in stored]

    scored = [
        {**job, "match_score": skill_match_score(user_skills, job.get("required_skills"))}
        for job in jobs_db.list_recent_jobs(RECOMMENDATION_LIMIT)
    ]
    scored.sort(key=lambda job: job["match_score"], reverse=True)
    return [_shape_recommended(job) for job in scored]


def _skills_distribution(skills: list[dict[str, Any]]) -> dict[str, dict[str, int]]:
    by_category: dict[str, int] = {}
    by_proficiency: dict[str, int] = {}
    for skill in skills:
        category = skill.get("skill_category") or "other"
        by_category[category] = by_category.get(category, 0) + 1
        proficiency = skill.get("proficiency_level") or "beginner"
        by_proficiency[proficiency] = by_proficiency.get(proficiency, 0) + 1
    return {"byCategory": by_category, "byProficiency": by_proficiency}


def build_dashboard(user_id: str) -> dict[str, Any]:
    user = users_db.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    education = education_db.list_education(user_id)
    experience = experience_db.list_experience(user_id)
    skills = skills_db.list_user_skills(user_id)
    skill_names = [row["skill_name"] for row in skills]

    strength = profile_strength(user, len(education), experience, len(skills))

    gaps = [
        {
            "id": row["gap_id"],
            "skillName": row["skill_name"],
            "currentLevel": row.get("current_level"),
            "targetLevel": row.get("target_level"),
            "severity": row.get("gap_severity"),
            "priorityScore": row.get("priority_score"),
        }
        for row in skills_db.list_open_skill_gaps(user_id, GAP_LIMIT)
    ]

    learning_paths = [
        {
            "id": row["path_id"],
            "name": row["path_name"],
            "targetRole": row.get("target_role"),
            "status": row.get("status"),
            "completionPercentage": float(row.get("completion_percentage") or 0),
            "totalModules": int(row.get("total_modules") or 0),
            "completedModules": int(row.get("completed_modules") or 0),
        }
        for row in dashboard_db.list_learning_paths(user_id)
    ]

    latest_ats = ats_db.get_latest_report(user_id)

    return {
        "user": {
            "userId": user["user_id"],
            "firstName": user.get("first_name"),
            "lastName": user.get("last_name"),
            "email": user.get("email"),
            "fullName": full_name(user.get("first_name"), user.get("last_name")),
            "currentCity": user.get("current_city"),
            "bio": user.get("bio"),
            "profilePictureUrl": user.get("profile_picture_url"),
        },
        "profileStrength": strength,
        "profileBreakdown": profile_breakdown(user, len(education), len(experience), len(skills)),
        "activeApplications": applications_db.count_active(user_id),
        "interviewsScheduled": applications_db.count_with_status(user_id, "interview"),
        "matchRanking": match_ranking(strength),
        "skillsCount": len(skills),
        "recommendedJobs": recommended_jobs(user_id, skill_names),
        "skillGaps": gaps,
        "learningPaths": learning_paths,
        "applications": [
            shape_application(row) for row in applications_db.list_applications(user_id, APPLICATION_LIMIT)
        ],
        "atsData": shape_report(latest_ats) if latest_ats else None,
        "skillsDistribution": _skills_distribution(skills),
    }
