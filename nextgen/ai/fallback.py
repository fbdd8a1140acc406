"""Two-tier model selection: retry the primary model on overload, then fall back."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Optional, Sequence

from nextgen.ai.types import AIClient, AIProviderError, AIResponseError, ChatMessage

logger = logging.getLogger(__name__)


async def _call_with_retry(
    client: AIClient,
    messages: Sequence[ChatMessage],
    *,
    model: str,
    attempts: int,
    backoff_s: float,
    **kwargs: Any,
) -> str:
    last_error: Optional[AIProviderError] = None
    for attempt in range(1, attempts + 1):
        started = time.perf_counter()
        try:
            text = await client.generate(messages, model=model, **kwargs)
        except AIProviderError as exc:
            if not exc.overloaded:
                raise
            last_error = exc
            logger.warning(
                json.dumps(
                    {
                        "event": "ai_overloaded",
                        "model": model,
                        "attempt": attempt,
                        "latency_ms": int((time.perf_counter() - started) * 1000),
                    }
                )
            )
            if attempt < attempts:
                await asyncio.sleep(backoff_s * attempt)
            continue

        logger.info(
            json.dumps(
                {
                    "event": "ai_generate",
                    "model": model,
                    "attempt": attempt,
                    "latency_ms": int((time.perf_counter() - started) * 1000),
                }
            )
        )
        return text

    assert last_error is not None
    raise last_error


async def generate_with_fallback(
    client: AIClient,
    messages: Sequence[ChatMessage],
    *,
    primary: str,
    fallback: Optional[str],
    attempts: int = 2,
    backoff_s: float = 0.8,
    **kwargs: Any,
) -> tuple[str, str]:
    """Return ``(text, model_used)``.

    Each model gets ``attempts`` calls. Only a 503 is retried, after sleeping
    ``backoff_s * attempt`` seconds; any other provider error propagates at once.
    If the primary model is still overloaded the fallback model gets the same
    treatment, and its final overload error is raised.
    """
    try:
        text = await _call_with_retry(
            client, messages, model=primary, attempts=attempts, backoff_s=backoff_s, **kwargs
        )
        return text, primary
    except AIProviderError as exc:
        if not exc.overloaded or not fallback:
            raise
        logger.warning(json.dumps({"event": "ai_fallback", "from": primary, "to": fallback}))

    text = await _call_with_retry(
        client, messages, model=fallback, attempts=attempts, backoff_s=backoff_s, **kwargs
    )
    return text, fallback


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_json_object(text: str) -> dict[str, Any]:
    try:
        parsed = json.loads(strip_code_fences(text))
    except ValueError as exc:
        raise AIResponseError(f"Model returned invalid JSON: {exc}", raw=text) from exc
    if not isinstance(parsed, dict):
        raise AIResponseError("Model returned JSON that is not an object", raw=text)
    return parsed
