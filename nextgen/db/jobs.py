from __future__ import annotations

from typing import Any, Sequence

from nextgen.db.connection import encode_json, execute, fetch_all, fetch_one, today_iso

_COLUMNS = (
    "job_id, job_title, company_name, job_location, job_type, salary_min, salary_max, "
    "job_description, required_skills, posted_date, is_active"
)


def _in_clause(column: str, values: Sequence[str]) -> str:
    placeholders = ", ".join("?" for _ in values)
    return f"{column} IN ({placeholders})"


def list_jobs(
    *,
    search: str | None = None,
    job_types: Sequence[str] = (),
    locations: Sequence[str] = (),
) -> list[dict[str, Any]]:
    clauses = ["is_active = 1"]
    params: list[Any] = []

    if search:
        clauses.append("(LOWER(job_title) LIKE ? OR LOWER(company_name) LIKE ?)")
        pattern = f"%{search.lower()}%"
        params.extend([pattern, pattern])

    if job_types:
        clauses.append(_in_clause("job_type", job_types))
        params.extend(job_types)

    if locations:
        clauses.append(_in_clause("job_location", locations))
        params.extend(locations)

    where = " AND ".join(clauses)
    return fetch_all(
        f"SELECT {_COLUMNS} FROM job_postings WHERE {where} ORDER BY posted_date DESC, job_id DESC",
        params,
    )


def get_job(job_id: int) -> dict[str, Any] | None:
    return fetch_one(f"SELECT {_COLUMNS} FROM job_postings WHERE job_id = ?", (job_id,))


def list_recent_jobs(limit: int = 10) -> list[dict[str, Any]]:
    return fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM job_postings
        WHERE is_active = 1
        ORDER BY posted_date DESC, job_id DESC
        LIMIT ?
        """,
        (limit,),
    )


def insert_job(record: dict[str, Any]) -> dict[str, Any]:
    cursor = execute(
        """
        INSERT INTO job_postings (
            job_title, company_name, job_location, job_type, salary_min, salary_max,
            job_description, required_skills, posted_date, is_active
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record["job_title"],
            record["company_name"],
            record.get("job_location"),
            record.get("job_type") or "full_time",
            record.get("salary_min"),
            record.get("salary_max"),
            record.get("job_description"),
            encode_json(list(record.get("required_skills") or [])),
            record.get("posted_date") or today_iso(),
            0 if record.get("is_active") is False else 1,
        ),
    )
    return get_job(int(cursor.lastrowid)) or {}


def list_job_recommendations(user_id: str, limit: int = 10) -> list[dict[str, Any]]:
    return fetch_all(
        """
        SELECT r.recommendation_id, r.match_score,
               j.job_id, j.job_title, j.company_name, j.job_location, j.job_type,
               j.salary_min, j.salary_max, j.required_skills, j.posted_date
        FROM recommendations r
        JOIN job_postings j ON r.entity_id = j.job_id
        WHERE r.user_id = ? AND r.entity_type = 'job' AND j.is_active = 1
        ORDER BY r.match_score DESC
        LIMIT ?
        """,
        (user_id, limit),
    )
