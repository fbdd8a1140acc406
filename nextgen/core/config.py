from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    database_path: str
    storage_dir: str
    resume_bucket: str
    api_key: str | None
    rate_limit: str
    ai_rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    ai_provider: str
    ai_primary_model: str | None
    ai_fallback_model: str | None
    ai_retry_attempts: int
    ai_retry_backoff_s: float
    chat_history_messages: int
    gemini_api_key: str | None
    smtp_host: str
    smtp_port: int
    smtp_user: str | None
    smtp_password: str | None
    smtp_from: str | None
    smtp_use_tls: bool
    smtp_fallback_ssl: bool
    otp_ttl_minutes: int
    otp_max_attempts: int
    max_upload_bytes: int


settings = Settings(
    database_path=_get_env("DATABASE_PATH", "data/nextgen.db") or "data/nextgen.db",
    storage_dir=_get_env("STORAGE_DIR", "data/storage") or "data/storage",
    resume_bucket=_get_env("RESUME_BUCKET", "resumes") or "resumes",
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "120/minute") or "120/minute",
    ai_rate_limit=_get_env("AI_RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
    ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
    ai_primary_model=_get_env("AI_PRIMARY_MODEL"),
    ai_fallback_model=_get_env("AI_FALLBACK_MODEL"),
    ai_retry_attempts=max(1, _get_env_int("AI_RETRY_ATTEMPTS", 2)),
    ai_retry_backoff_s=max(0.0, _get_env_float("AI_RETRY_BACKOFF_S", 0.8)),
    chat_history_messages=max(0, _get_env_int("CHAT_HISTORY_MESSAGES", 6)),
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    smtp_host=_get_env("SMTP_HOST", "smtp.gmail.com") or "smtp.gmail.com",
    smtp_port=_get_env_int("SMTP_PORT", 587),
    smtp_user=_get_env("SMTP_USER") or _get_env("SMTP_USERNAME"),
    smtp_password=_get_env("SMTP_PASSWORD"),
    smtp_from=_get_env("SMTP_FROM") or _get_env("FROM_EMAIL"),
    smtp_use_tls=_get_env_bool("SMTP_USE_TLS", True),
    smtp_fallback_ssl=_get_env_bool("SMTP_FALLBACK_SSL", True),
    otp_ttl_minutes=max(1, _get_env_int("OTP_TTL_MINUTES", 10)),
    otp_max_attempts=max(1, _get_env_int("OTP_MAX_ATTEMPTS", 5)),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
)

if settings.ai_provider not in {"gemini", "openai"}:
    raise RuntimeError("AI_PROVIDER must be either 'gemini' or 'openai'.")
