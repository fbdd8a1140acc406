"""Server-side one-time passcodes for the two-factor email flow.

Only a SHA-256 digest of each code is stored. A new request for the same
email and purpose invalidates the previous code. A code is spent on success or
after too many wrong guesses.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone

from nextgen.core.config import settings
from nextgen.db import otp as otp_db
from nextgen.db import users as users_db
from nextgen.integrations.email import EmailDeliveryError, EmailNotConfiguredError, send_otp_email
from nextgen.services.errors import InvalidRequestError

logger = logging.getLogger(__name__)

OTP_PURPOSES = ("2fa_enable", "login")


class OTPError(InvalidRequestError):
    pass


def _hash_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def generate_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _check_purpose(purpose: str | None) -> str:
    value = (purpose or "login").strip()
    if value not in OTP_PURPOSES:
        raise OTPError(f"purpose must be one of: {', '.join(OTP_PURPOSES)}")
    return value


def request_code(email: str | None, purpose: str | None) -> dict[str, object]:
    address = _normalize_email(email)
    if not address:
        raise OTPError("Email is required")
    kind = _check_purpose(purpose)

    code = generate_code()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.otp_ttl_minutes)
    otp_db.invalidate_pending(address, kind)
    otp_id = otp_db.insert_code(address, kind, _hash_code(code), expires_at.isoformat())

    try:
        send_otp_email(address, code, kind)
    except (EmailNotConfiguredError, EmailDeliveryError):
        otp_db.consume(otp_id)
        raise
    logger.info("otp_sent purpose=%s", kind)
    return {"success": True, "message": "OTP sent successfully", "expires_in_minutes": settings.otp_ttl_minutes}


def verify_code(email: str | None, purpose: str | None, code: str | None) -> dict[str, object]:
    address = _normalize_email(email)
    kind = _check_purpose(purpose)
    candidate = (code or "").strip()
    if not address or not candidate:
        raise OTPError("Email and code are required")

    pending = otp_db.get_pending(address, kind)
    if pending is None:
        raise OTPError("No pending verification code")

    expires_at = datetime.fromisoformat(pending["expires_at"])
    if datetime.now(timezone.utc) >= expires_at:
        otp_db.consume(pending["otp_id"])
        raise OTPError("Verification code has expired")

    if pending["attempts"] >= settings.otp_max_attempts:
        otp_db.consume(pending["otp_id"])
        raise OTPError("Too many attempts. Request a new code.")

    if not hmac.compare_digest(pending["code_hash"], _hash_code(candidate)):
        otp_db.record_failed_attempt(pending["otp_id"])
        if pending["attempts"] + 1 >= settings.otp_max_attempts:
            otp_db.consume(pending["otp_id"])
        raise OTPError("Invalid verification code")

    otp_db.consume(pending["otp_id"])
    if kind == "2fa_enable":
        users_db.set_two_factor(address, True)
    logger.info("otp_verified purpose=%s", kind)
    return {"success": True, "verified": True, "purpose": kind}


def purge_expired_codes() -> int:
    return otp_db.purge_expired(datetime.now(timezone.utc).isoformat())
