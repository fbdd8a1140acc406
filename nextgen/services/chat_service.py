from __future__ import annotations

import hashlib
import json
import logging
import time
from datetime import datetime, timezone
from typing import Any

from nextgen.ai.config import load_ai_config
from nextgen.ai.factory import get_ai_client
from nextgen.ai.fallback import generate_with_fallback
from nextgen.ai.types import ChatMessage
from nextgen.core.config import settings
from nextgen.db import chat as chat_db
from nextgen.db import experience as experience_db
from nextgen.db import skills as skills_db
from nextgen.db import users as users_db
from nextgen.services.errors import InvalidRequestError, NotFoundError
from nextgen.services.formatting import clean_markdown

logger = logging.getLogger("nextgen.chat")

RECENT_ROLES = 3

PLAIN_TEXT_RULES = (
    "Provide helpful, professional, and encouraging career advice. Be concise but informative. "
    "IMPORTANT: Do NOT use any markdown formatting in your response. No asterisks (*), "
    "underscores (_), hash symbols (#), or any other markdown characters. Use plain text only."
)


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def build_system_prompt(
    user: dict[str, Any],
    skills: list[str],
    roles: list[dict[str, Any]],
) -> str:
    prompt = "You are a helpful career advisor AI assistant. "
    if user.get("first_name"):
        prompt += f"The user's name is {user['first_name']} {user.get('last_name') or ''}. "
    if skills:
        prompt += f"They have skills in: {', '.join(skills)}. "
    if roles:
        experience = ", ".join(f"{r.get('job_title')} at {r.get('company_name')}" for r in roles)
        prompt += f"Their work experience includes: {experience}. "
    if user.get("bio"):
        prompt += f"About them: {user['bio']}. "
    return prompt + PLAIN_TEXT_RULES


def _history_messages(messages: list[dict[str, Any]]) -> list[ChatMessage]:
    limit = settings.chat_history_messages
    if limit <= 0:
        return []
    history: list[ChatMessage] = []
    for item in messages[-limit:]:
        role = item.get("role")
        content = item.get("content")
        if role in ("user", "assistant") and isinstance(content, str) and content:
            history.append(ChatMessage(role=role, content=content))
    return history


def get_history(user_id: str) -> dict[str, Any]:
    session = chat_db.get_latest_active_session(user_id)
    if session is None:
        return {"sessionId": None, "messages": []}
    return {
        "sessionId": session["session_id"],
        "messages": session.get("messages") or [],
        "startedAt": session["started_at"],
        "lastMessageAt": session["last_message_at"],
    }


async def send_message(user_id: str, message: str | None, session_id: str | None = None) -> dict[str, Any]:
    started_at = time.perf_counter()
    text = (message or "").strip()
    if not text:
        raise InvalidRequestError("Message is required")

    user = users_db.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    skills = skills_db.list_user_skill_names(user_id)
    roles = experience_db.list_experience(user_id, limit=RECENT_ROLES)

    existing = chat_db.get_session(user_id, session_id) if session_id else None
    stored_messages: list[dict[str, Any]] = list(existing.get("messages") or []) if existing else []

    chat_messages = [
        ChatMessage(role="system", content=build_system_prompt(user, skills, roles)),
        *_history_messages(stored_messages),
        ChatMessage(role="user", content=text),
    ]

    logger.info(
        json.dumps(
            {
                "event": "chat_request",
                "user_hash": _short_hash(user_id),
                "session_hash": _short_hash(session_id),
                "resumed": existing is not None,
                "history": len(chat_messages) - 2,
                "message_len": len(text),
            }
        )
    )

    user_message = {"role": "user", "content": text, "timestamp": _timestamp()}

    cfg = load_ai_config()
    reply, model_used = await generate_with_fallback(
        get_ai_client(),
        chat_messages,
        primary=cfg.primary_model,
        fallback=cfg.fallback_model,
        attempts=cfg.retry_attempts,
        backoff_s=cfg.retry_backoff_s,
    )

    assistant_message = {
        "role": "assistant",
        "content": clean_markdown(reply),
        "timestamp": _timestamp(),
    }
    all_messages = [*stored_messages, user_message, assistant_message]

    if existing is not None:
        chat_db.save_messages(user_id, existing["session_id"], all_messages)
        current_session_id = existing["session_id"]
    else:
        current_session_id = chat_db.create_session(user_id, all_messages)["session_id"]

    logger.info(
        json.dumps(
            {
                "event": "chat_complete",
                "session_hash": _short_hash(current_session_id),
                "model": model_used,
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )

    return {
        "sessionId": current_session_id,
        "userMessage": user_message,
        "assistantMessage": assistant_message,
        "allMessages": all_messages,
    }


def end_session(user_id: str, session_id: str) -> None:
    chat_db.deactivate_session(user_id, session_id)
