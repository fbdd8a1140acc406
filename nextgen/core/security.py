from __future__ import annotations

import bcrypt
from fastapi import Header, HTTPException, status

from nextgen.core.config import settings


def _normalize_lang(lang: str | None) -> str:
    if not lang:
        return "en"
    return lang.split(",")[0].split("-")[0].strip().lower()


def _auth_error_message(lang: str | None) -> str:
    key = _normalize_lang(lang)
    messages = {
        "en": "Please provide a valid API key.",
        "de": "Bitte gib einen gültigen API-Schlüssel an.",
        "fr": "Veuillez fournir une clé API valide.",
        "es": "Por favor, proporciona una clave API válida.",
    }
    return messages.get(key, messages["en"])


def check_api_key(x_api_key: str | None, lang: str | None = None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_auth_error_message(lang),
        )


async def require_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    accept_language: str | None = Header(default=None, alias="Accept-Language"),
) -> None:
    check_api_key(x_api_key, accept_language)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
