from __future__ import annotations

from nextgen.core.config import settings


def cors_allowed_origins() -> list[str]:
    return list(settings.cors_allowed_origins)


def cors_allow_credentials() -> bool:
    # Browsers reject credentialed requests against a wildcard origin.
    if "*" in settings.cors_allowed_origins:
        return False
    return settings.cors_allow_credentials
