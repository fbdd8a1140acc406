"""ATS report generation: profile context, model call with fallback, normalisation."""

from __future__ import annotations

import json
import logging
from typing import Any

from nextgen.ai.config import load_ai_config
from nextgen.ai.factory import get_ai_client
from nextgen.ai.fallback import generate_with_fallback, parse_json_object
from nextgen.ai.types import ChatMessage
from nextgen.db import ats as ats_db
from nextgen.db import education as education_db
from nextgen.db import experience as experience_db
from nextgen.db import skills as skills_db
from nextgen.db import users as users_db
from nextgen.services.errors import NotFoundError

logger = logging.getLogger(__name__)

BREAKDOWN_KEYS = ("skills", "experience", "education", "profileCompleteness")

ATS_PROMPT = """You are an ATS evaluator. Using the user's full profile data, produce a JSON-only response.

Return strict JSON with this schema:
{{
  "score": number (0-100),
  "summary": string,
  "strengths": string[],
  "gaps": string[],
  "recommendations": string[],
  "keywordsToAdd": string[],
  "breakdown": {{
    "skills": number (0-100),
    "experience": number (0-100),
    "education": number (0-100),
    "profileCompleteness": number (0-100)
  }}
}}

Scoring rules:
- Score fairly based on relevancy, recency, role clarity, quantified impact, and alignment between skills, experience, and education.
- Recommendations should be concrete and actionable.
- keywordsToAdd should be 5-10 targeted terms that improve ATS matching.

User data:
{profile_context}

Respond with JSON only, no markdown, no code fences."""


def _years(value: Any) -> str:
    if value is None or value == "":
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_profile_context(
    user: dict[str, Any] | None,
    education: list[dict[str, Any]],
    experience: list[dict[str, Any]],
    skills: list[dict[str, Any]],
) -> str:
    parts: list[str] = []

    if user:
        parts.append(
            f"User: {user.get('first_name') or ''} {user.get('last_name') or ''} "
            f"({user.get('email') or 'no email'})"
        )
        if user.get("current_city"):
            parts.append(f"Location: {user['current_city']}")
        if user.get("bio"):
            parts.append(f"Bio: {user['bio']}")

    if skills:
        skill_list = "; ".join(
            f"{s['skill_name']} (level {s.get('proficiency_level') or 'n/a'}, "
            f"exp {_years(s.get('years_of_experience'))}y)"
            for s in skills
        )
        parts.append(f"Skills: {skill_list}")

    if experience:
        exp_list = " | ".join(
            f"{e.get('job_title') or 'Role'} at {e.get('company_name') or 'Company'} "
            f"({e.get('start_date') or 'start'} - "
            f"{'Present' if e.get('is_current') else e.get('end_date') or 'end'}) "
            f"{e.get('description') or ''}".rstrip()
            for e in experience
        )
        parts.append(f"Experience: {exp_list}")

    if education:
        edu_list = " | ".join(
            f"{e.get('degree_title') or e.get('degree_type') or 'Degree'} in "
            f"{e.get('field_of_study') or 'Field'} at {e.get('institution_name') or 'Institution'} "
            f"({e.get('start_date') or 'start'} - {e.get('end_date') or 'end'})"
            for e in education
        )
        parts.append(f"Education: {edu_list}")

    return "\n".join(parts)


def _number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(number) if number.is_integer() else number


def _string_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def normalize_report(parsed: dict[str, Any]) -> dict[str, Any]:
    breakdown = parsed.get("breakdown") if isinstance(parsed.get("breakdown"), dict) else {}
    return {
        "score": _number(parsed.get("score")),
        "summary": parsed.get("summary") or "No summary available.",
        "strengths": _string_list(parsed.get("strengths")),
        "gaps": _string_list(parsed.get("gaps")),
        "recommendations": _string_list(parsed.get("recommendations")),
        "keywordsToAdd": _string_list(parsed.get("keywordsToAdd")),
        "breakdown": {key: _number(breakdown.get(key)) for key in BREAKDOWN_KEYS},
    }


def shape_report(row: dict[str, Any]) -> dict[str, Any]:
    """Stored ``ats_reports`` row in the camelCase shape the clients read."""
    return {
        "score": _number(row.get("score")),
        "summary": row.get("summary") or "",
        "strengths": _string_list(row.get("strengths")),
        "gaps": _string_list(row.get("gaps")),
        "recommendations": _string_list(row.get("recommendations")),
        "keywordsToAdd": _string_list(row.get("keywords_to_add")),
        "breakdown": row.get("breakdown") if isinstance(row.get("breakdown"), dict) else {},
        "modelUsed": row.get("model_used") or "",
        "createdAt": row.get("created_at"),
    }


async def generate_report(user_id: str) -> dict[str, Any]:
    user = users_db.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    context = build_profile_context(
        user,
        education_db.list_education(user_id),
        experience_db.list_experience(user_id),
        skills_db.list_user_skills(user_id),
    )
    prompt = ATS_PROMPT.format(profile_context=context)

    cfg = load_ai_config()
    client = get_ai_client()
    text, model_used = await generate_with_fallback(
        client,
        [ChatMessage(role="user", content=prompt)],
        primary=cfg.primary_model,
        fallback=cfg.fallback_model,
        attempts=cfg.retry_attempts,
        backoff_s=cfg.retry_backoff_s,
    )

    parsed = parse_json_object(text)
    report = normalize_report(parsed)
    saved = ats_db.insert_report(user_id, report, model_used=model_used, raw_response=text)

    logger.info(
        json.dumps(
            {
                "event": "ats_report",
                "user_id": user_id,
                "model": model_used,
                "score": report["score"],
                "report_id": saved.get("report_id"),
            }
        )
    )

    return {
        **report,
        "model": model_used,
        "raw": text,
        "reportId": saved.get("report_id"),
        "createdAt": saved.get("created_at"),
    }


def latest_report(user_id: str) -> dict[str, Any]:
    row = ats_db.get_latest_report(user_id)
    if row is None:
        raise NotFoundError("No ATS report found")
    return shape_report(row)
