from __future__ import annotations

from typing import Any

from nextgen.db.connection import execute, fetch_all, fetch_one, utc_now

_CATALOG_COLUMNS = "skill_id, skill_name, skill_category, demand_score, is_trending"

# Expert first; SQLite has no enum ordering, so rank explicitly.
_PROFICIENCY_RANK = """
    CASE us.proficiency_level
        WHEN 'expert' THEN 4
        WHEN 'advanced' THEN 3
        WHEN 'intermediate' THEN 2
        WHEN 'beginner' THEN 1
        ELSE 0
    END
"""


def list_catalog() -> list[dict[str, Any]]:
    return fetch_all(f"SELECT {_CATALOG_COLUMNS} FROM skills_catalog ORDER BY skill_name ASC")


def search_catalog(query: str, limit: int = 20) -> list[dict[str, Any]]:
    return fetch_all(
        f"""
        SELECT {_CATALOG_COLUMNS}
        FROM skills_catalog
        WHERE skill_name LIKE ?
        ORDER BY demand_score DESC, skill_name ASC
        LIMIT ?
        """,
        (f"%{query}%", limit),
    )


def find_skill_by_name(name: str) -> dict[str, Any] | None:
    return fetch_one(
        f"SELECT {_CATALOG_COLUMNS} FROM skills_catalog WHERE LOWER(skill_name) = LOWER(?) LIMIT 1",
        (name,),
    )


def get_skill(skill_id: int) -> dict[str, Any] | None:
    return fetch_one(f"SELECT {_CATALOG_COLUMNS} FROM skills_catalog WHERE skill_id = ?", (skill_id,))


def create_skill(name: str, category: str = "technical") -> dict[str, Any]:
    cursor = execute(
        "INSERT INTO skills_catalog (skill_name, skill_category) VALUES (?, ?)",
        (name, category),
    )
    return get_skill(int(cursor.lastrowid)) or {}


def find_or_create_skill(name: str, category: str = "technical") -> dict[str, Any]:
    existing = find_skill_by_name(name)
    if existing:
        return existing
    return create_skill(name, category)


def list_user_skills(user_id: str) -> list[dict[str, Any]]:
    return fetch_all(
        f"""
        SELECT us.user_skill_id, us.proficiency_level, us.years_of_experience, us.source,
               sc.skill_id, sc.skill_name, sc.skill_category, sc.demand_score, sc.is_trending
        FROM user_skills us
        JOIN skills_catalog sc ON us.skill_id = sc.skill_id
        WHERE us.user_id = ?
        ORDER BY {_PROFICIENCY_RANK} DESC, us.years_of_experience DESC
        """,
        (user_id,),
    )


def list_user_skill_names(user_id: str) -> list[str]:
    rows = fetch_all(
        """
        SELECT sc.skill_name
        FROM user_skills us
        JOIN skills_catalog sc ON us.skill_id = sc.skill_id
        WHERE us.user_id = ?
        ORDER BY us.user_skill_id ASC
        """,
        (user_id,),
    )
    return [row["skill_name"] for row in rows]


def get_user_skill(user_skill_id: int) -> dict[str, Any] | None:
    return fetch_one("SELECT * FROM user_skills WHERE user_skill_id = ?", (user_skill_id,))


def user_has_skill(user_id: str, skill_id: int) -> bool:
    row = fetch_one(
        "SELECT 1 AS found FROM user_skills WHERE user_id = ? AND skill_id = ?",
        (user_id, skill_id),
    )
    return row is not None


def insert_user_skill(
    user_id: str,
    skill_id: int,
    *,
    proficiency_level: str = "intermediate",
    years_of_experience: float = 0,
    source: str = "manual_entry",
) -> dict[str, Any]:
    """Plain insert; a duplicate (user_id, skill_id) raises sqlite3.IntegrityError."""
    cursor = execute(
        """
        INSERT INTO user_skills (user_id, skill_id, proficiency_level, years_of_experience, source, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, skill_id, proficiency_level, years_of_experience, source, utc_now()),
    )
    return get_user_skill(int(cursor.lastrowid)) or {}


def insert_user_skill_if_absent(
    user_id: str,
    skill_id: int,
    *,
    proficiency_level: str = "intermediate",
    years_of_experience: float = 0,
    source: str = "manual_entry",
) -> dict[str, Any] | None:
    cursor = execute(
        """
        INSERT INTO user_skills (user_id, skill_id, proficiency_level, years_of_experience, source, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT (user_id, skill_id) DO NOTHING
        """,
        (user_id, skill_id, proficiency_level, years_of_experience, source, utc_now()),
    )
    if cursor.rowcount == 0:
        return None
    return get_user_skill(int(cursor.lastrowid))


def update_user_skill(
    user_id: str,
    user_skill_id: int,
    *,
    proficiency_level: str | None,
    years_of_experience: float | None,
) -> dict[str, Any] | None:
    cursor = execute(
        """
        UPDATE user_skills
        SET proficiency_level = COALESCE(?, proficiency_level),
            years_of_experience = COALESCE(?, years_of_experience)
        WHERE user_skill_id = ? AND user_id = ?
        """,
        (proficiency_level, years_of_experience, user_skill_id, user_id),
    )
    if cursor.rowcount == 0:
        return None
    return get_user_skill(user_skill_id)


def delete_user_skill(user_id: str, user_skill_id: int) -> bool:
    cursor = execute(
        "DELETE FROM user_skills WHERE user_skill_id = ? AND user_id = ?",
        (user_skill_id, user_id),
    )
    return cursor.rowcount > 0


def delete_all_user_skills(user_id: str) -> int:
    cursor = execute("DELETE FROM user_skills WHERE user_id = ?", (user_id,))
    return int(cursor.rowcount or 0)


def list_open_skill_gaps(user_id: str, limit: int | None = None) -> list[dict[str, Any]]:
    sql = """
        SELECT sg.gap_id, sg.current_level, sg.target_level, sg.gap_severity, sg.priority_score,
               sc.skill_name
        FROM skill_gaps sg
        JOIN skills_catalog sc ON sg.skill_id = sc.skill_id
        WHERE sg.user_id = ? AND sg.is_resolved = 0
        ORDER BY sg.priority_score DESC, sg.gap_severity DESC
    """
    params: tuple[Any, ...] = (user_id,)
    if limit is not None:
        sql += " LIMIT ?"
        params = (user_id, limit)
    return fetch_all(sql, params)
