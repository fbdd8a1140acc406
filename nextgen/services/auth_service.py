from __future__ import annotations

import logging
import sqlite3
from typing import Any

from nextgen.core.security import hash_password, verify_password
from nextgen.db import users as users_db
from nextgen.services.errors import InvalidRequestError, ServiceError
from nextgen.services.formatting import full_name

logger = logging.getLogger(__name__)


class InvalidCredentialsError(ServiceError):
    status_code = 401


def split_full_name(value: str | None) -> tuple[str, str]:
    parts = (value or "").split(" ")
    return parts[0], " ".join(parts[1:])


def signup(email: str | None, password: str | None, name: str | None) -> dict[str, Any]:
    address = (email or "").strip()
    if not address or not password:
        raise InvalidRequestError("Email and password are required")
    if users_db.email_taken(address):
        raise InvalidRequestError("User already exists")

    first_name, last_name = split_full_name(name)
    try:
        user = users_db.create_user(
            email=address,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
    except sqlite3.IntegrityError as exc:
        raise InvalidRequestError("User already exists") from exc

    logger.info("user_signup user_id=%s", user["user_id"])
    return {
        "message": "User created successfully",
        "user": {
            "user_id": user["user_id"],
            "email": user["email"],
            "full_name": full_name(user.get("first_name"), user.get("last_name")),
        },
    }


def login(email: str | None, password: str | None) -> dict[str, Any]:
    address = (email or "").strip()
    if not address or not password:
        raise InvalidRequestError("Email and password are required")

    user = users_db.get_user_with_password(address)
    if user is None or not verify_password(password, user.get("password_hash")):
        raise InvalidCredentialsError("Invalid credentials")

    bio = user.get("bio") or ""
    return {
        "message": "Login successful",
        "user": {
            "user_id": user["user_id"],
            "email": user["email"],
            "full_name": full_name(user.get("first_name"), user.get("last_name")),
            "current_job": bio.split(".")[0] if bio else "",
        },
        "two_factor_required": bool(user.get("two_factor_enabled")),
    }
