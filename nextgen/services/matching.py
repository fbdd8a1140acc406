from __future__ import annotations

import math
from typing import Any, Iterable

BASE_SCORE = 0.5
MAX_SCORE = 0.95


def _as_skill_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(item).strip().lower() for item in value if str(item).strip()]
    if isinstance(value, str):
        return [item.strip().lower() for item in value.split(",") if item.strip()]
    return []


def skill_match_score(user_skills: Iterable[str], required_skills: Any) -> float:
    """Overlap score in [0.5, 0.95].

    A required skill counts as matched when it and any user skill contain one
    another ("react" matches "react native"). With no skills on either side the
    base score is returned.
    """
    mine = [skill.strip().lower() for skill in user_skills if skill and skill.strip()]
    required = _as_skill_list(required_skills)
    if not mine or not required:
        return BASE_SCORE

    matched = [job_skill for job_skill in required if any(us in job_skill or job_skill in us for us in mine)]
    return min(MAX_SCORE, BASE_SCORE + (len(matched) / len(required)) * 0.5)


def as_percent(score: float | None) -> int:
    value = score if score is not None else BASE_SCORE
    return math.floor(value * 100 + 0.5)
