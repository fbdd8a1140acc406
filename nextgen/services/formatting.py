from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from typing import Any


def _k(amount: int | float) -> str:
    if amount >= 1000:
        return f"${math.floor(amount / 1000 + 0.5)}k"
    return f"${_plain_number(amount)}"


def _plain_number(amount: int | float) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def format_salary(salary_min: int | float | None, salary_max: int | float | None) -> str:
    """Job board style: ``$120k - $150k``, ``From $90k``, ``Up to $60k`` or ``Negotiable``."""
    if not salary_min and not salary_max:
        return "Negotiable"
    if salary_min and salary_max:
        return f"{_k(salary_min)} - {_k(salary_max)}"
    if salary_min:
        return f"From {_k(salary_min)}"
    return f"Up to {_k(salary_max)}"


def format_salary_range(salary_min: int | float | None, salary_max: int | float | None) -> str:
    """Dashboard style: raw figures, ``$min+`` when open-ended."""
    if salary_min and salary_max:
        return f"${_plain_number(salary_min)} - ${_plain_number(salary_max)}"
    if salary_min:
        return f"${_plain_number(salary_min)}+"
    return "Not specified"


def format_job_type(job_type: str | None) -> str:
    if not job_type:
        return ""
    if job_type == "full_time":
        return "Full-time"
    if job_type == "part_time":
        return "Part-time"
    return job_type[:1].upper() + job_type[1:]


def parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def iso_date(value: Any) -> str | None:
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def format_posted_date(value: Any, today: date | None = None) -> str:
    posted = parse_date(value)
    if posted is None:
        return "Recently"
    today = today or datetime.now(timezone.utc).date()
    days = (today - posted).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    return f"{days // 30} months ago"


_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_BOLD_STARS = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_STARS = re.compile(r"\*(.*?)\*")
_BOLD_UNDERSCORES = re.compile(r"__(.*?)__")
_ITALIC_UNDERSCORES = re.compile(r"_(.*?)_")
_HEADERS = re.compile(r"#{1,6}\s*(.*)")
_LINKS = re.compile(r"\[(.*?)\]\(.*?\)")
_INLINE_CODE = re.compile(r"`(.*?)`")
_RULES = re.compile(r"---+")
_BLANK_RUNS = re.compile(r"\n{3,}")


def clean_markdown(text: str | None) -> str:
    """Reduce a model reply to plain text."""
    if not text:
        return ""
    # Fenced blocks go first so their backticks are not read as inline code.
    text = _CODE_BLOCK.sub("", text)
    text = _BOLD_STARS.sub(r"\1", text)
    text = _ITALIC_STARS.sub(r"\1", text)
    text = _BOLD_UNDERSCORES.sub(r"\1", text)
    text = _ITALIC_UNDERSCORES.sub(r"\1", text)
    text = _HEADERS.sub(r"\1", text)
    text = _LINKS.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)
    text = _RULES.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()


def split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def full_name(first_name: str | None, last_name: str | None) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()
