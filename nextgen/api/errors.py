from __future__ import annotations

import logging
import sqlite3
from typing import NoReturn

from fastapi import HTTPException, status

from nextgen.ai.types import AIConfigurationError, AIProviderError, AIResponseError
from nextgen.integrations.email import EmailDeliveryError, EmailNotConfiguredError
from nextgen.integrations.storage import StorageError
from nextgen.services.errors import ServiceError

logger = logging.getLogger("nextgen.api")

HANDLED_ERRORS = (
    ServiceError,
    AIProviderError,
    AIConfigurationError,
    AIResponseError,
    EmailNotConfiguredError,
    EmailDeliveryError,
    StorageError,
    sqlite3.Error,
)


def raise_http_error(exc: Exception, *, fallback: str = "Internal server error") -> NoReturn:
    """Translate a service-layer failure into the HTTP error the client sees."""
    if isinstance(exc, ServiceError):
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    if isinstance(exc, AIProviderError) and exc.overloaded:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Model temporarily unavailable",
        ) from exc
    if isinstance(exc, AIResponseError):
        logger.warning("ai_response_invalid: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    if isinstance(exc, (AIConfigurationError, EmailNotConfiguredError)):
        logger.error("%s: %s", type(exc).__name__, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    logger.exception("%s", fallback)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback) from exc
