from __future__ import annotations

from typing import Any

from nextgen.db.connection import encode_json, execute, fetch_one, utc_now


def insert_report(user_id: str, report: dict[str, Any], *, model_used: str, raw_response: str) -> dict[str, Any]:
    cursor = execute(
        """
        INSERT INTO ats_reports (
            user_id, score, summary, strengths, gaps, recommendations,
            keywords_to_add, breakdown, model_used, raw_response, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            report["score"],
            report["summary"],
            encode_json(report["strengths"]),
            encode_json(report["gaps"]),
            encode_json(report["recommendations"]),
            encode_json(report["keywordsToAdd"]),
            encode_json(report["breakdown"]),
            model_used,
            raw_response,
            utc_now(),
        ),
    )
    return fetch_one("SELECT * FROM ats_reports WHERE report_id = ?", (int(cursor.lastrowid),)) or {}


def get_latest_report(user_id: str) -> dict[str, Any] | None:
    return fetch_one(
        """
        SELECT *
        FROM ats_reports
        WHERE user_id = ?
        ORDER BY created_at DESC, report_id DESC
        LIMIT 1
        """,
        (user_id,),
    )
