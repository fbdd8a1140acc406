from dataclasses import dataclass
from typing import Optional

from nextgen.core.config import settings

# (primary, fallback) used when AI_PRIMARY_MODEL / AI_FALLBACK_MODEL are unset.
DEFAULT_MODELS = {
    "gemini": ("gemini-2.5-flash", "gemini-2.5-flash-lite"),
    "openai": ("gpt-4o-mini", "gpt-4.1-nano"),
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    primary_model: str
    fallback_model: Optional[str]
    retry_attempts: int
    retry_backoff_s: float


def load_ai_config() -> AIConfig:
    primary, fallback = DEFAULT_MODELS[settings.ai_provider]
    return AIConfig(
        provider=settings.ai_provider,
        primary_model=settings.ai_primary_model or primary,
        fallback_model=settings.ai_fallback_model or fallback,
        retry_attempts=max(1, settings.ai_retry_attempts),
        retry_backoff_s=max(0.0, settings.ai_retry_backoff_s),
    )
