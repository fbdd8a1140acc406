from __future__ import annotations

import json
import os
from typing import Any, Optional, Sequence

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from nextgen.ai.types import AIConfigurationError, AIProviderError, Attachment, ChatMessage


class OpenAIProvider:
    # Chat completions take text only; callers send extracted resume text instead.
    supports_documents = False

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise AIConfigurationError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: Optional[str] = None,
        json_schema: Optional[dict[str, Any]] = None,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        if attachments:
            raise AIConfigurationError("OpenAI provider does not accept document attachments")

        payload = [{"role": m.role, "content": m.content} for m in messages]
        if json_schema is not None:
            payload.insert(
                0,
                {
                    "role": "system",
                    "content": "Respond with a JSON object matching this schema:\n" + json.dumps(json_schema),
                },
            )

        create_kwargs: dict[str, Any] = {
            "model": model or self._model,
            "messages": payload,
            "temperature": self._temperature,
        }
        if json_schema is not None:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except APIStatusError as exc:
            raise AIProviderError(str(exc), status_code=exc.status_code) from exc
        except APIConnectionError as exc:
            raise AIProviderError(str(exc), status_code=503) from exc

        content = response.choices[0].message.content if response.choices else ""
        return (content or "").strip()
