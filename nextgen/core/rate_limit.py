from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from nextgen.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def _passthrough(func):
    return func


def rate_limit():
    if settings.rate_limit_enabled:
        return limiter.limit(settings.rate_limit)
    return _passthrough


def ai_rate_limit():
    """Tighter limit for routes that call the model or send email."""
    if settings.rate_limit_enabled:
        return limiter.limit(settings.ai_rate_limit)
    return _passthrough
