from __future__ import annotations

from typing import Any

from nextgen.db import ats as ats_db
from nextgen.db import skills as skills_db
from nextgen.services.ats_service import shape_report

PROFICIENCY_LEVELS = {
    "beginner": 25,
    "intermediate": 50,
    "advanced": 75,
    "expert": 100,
}

RADAR_SIZE = 6


def gap_priority(severity: str | None) -> str:
    if severity in ("critical", "high"):
        return "High"
    if severity == "medium":
        return "Medium"
    return "Low"


def skills_overview(user_id: str) -> dict[str, Any]:
    strengths = [
        {
            "id": row["user_skill_id"],
            "name": row["skill_name"],
            "category": row["skill_category"],
            "level": PROFICIENCY_LEVELS.get(row["proficiency_level"], 0),
            "proficiency": row["proficiency_level"],
        }
        for row in skills_db.list_user_skills(user_id)
    ]

    gaps = [
        {
            "id": row["gap_id"],
            "name": row["skill_name"],
            "priority": gap_priority(row.get("gap_severity")),
            "current": PROFICIENCY_LEVELS.get(row.get("current_level") or "", 0),
            "target": PROFICIENCY_LEVELS.get(row.get("target_level") or "", 100),
        }
        for row in skills_db.list_open_skill_gaps(user_id)
    ]

    radar = [{"skill": item["name"], "value": item["level"]} for item in strengths[:RADAR_SIZE]]

    latest = ats_db.get_latest_report(user_id)
    return {
        "strengths": strengths,
        "gaps": gaps,
        "radarData": radar,
        "atsReport": shape_report(latest) if latest else None,
    }
