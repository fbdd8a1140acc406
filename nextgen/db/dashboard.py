from __future__ import annotations

from typing import Any

from nextgen.db.connection import fetch_all


def list_learning_paths(user_id: str, limit: int = 5) -> list[dict[str, Any]]:
    return fetch_all(
        """
        SELECT lp.path_id, lp.path_name, lp.target_role, lp.status, lp.completion_percentage,
               COUNT(lm.module_id) AS total_modules,
               SUM(CASE WHEN lm.status = 'completed' THEN 1 ELSE 0 END) AS completed_modules
        FROM learning_paths lp
        LEFT JOIN learning_modules lm ON lm.path_id = lp.path_id
        WHERE lp.user_id = ?
        GROUP BY lp.path_id
        ORDER BY lp.created_at DESC
        LIMIT ?
        """,
        (user_id, limit),
    )
