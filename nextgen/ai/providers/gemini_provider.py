from __future__ import annotations

from typing import Any, Optional, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from nextgen.ai.types import AIConfigurationError, AIProviderError, Attachment, ChatMessage
from nextgen.core.config import settings


class GeminiProvider:
    supports_documents = True

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or settings.gemini_api_key or "").strip()
        if not key:
            raise AIConfigurationError("GEMINI_API_KEY is missing")
        self._client = genai.Client(api_key=key)

    @staticmethod
    def _contents(
        messages: Sequence[ChatMessage], attachments: Sequence[Attachment]
    ) -> tuple[Optional[str], list[types.Content]]:
        system_parts = [m.content for m in messages if m.role == "system"]
        contents: list[types.Content] = []
        for m in messages:
            if m.role == "system":
                continue
            role = "model" if m.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part.from_text(text=m.content)]))

        if attachments:
            files = [types.Part.from_bytes(data=a.data, mime_type=a.mime_type) for a in attachments]
            if contents and contents[-1].role == "user":
                contents[-1].parts = [*files, *(contents[-1].parts or [])]
            else:
                contents.append(types.Content(role="user", parts=files))

        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return system_instruction, contents

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: Optional[str] = None,
        json_schema: Optional[dict[str, Any]] = None,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        system_instruction, contents = self._contents(messages, attachments)
        config_kwargs: dict[str, Any] = {"temperature": self._temperature}
        if system_instruction:
            config_kwargs["system_instruction"] = system_instruction
        if json_schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = json_schema

        try:
            response = await self._client.aio.models.generate_content(
                model=model or self._model,
                contents=contents,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except genai_errors.APIError as exc:
            raise AIProviderError(str(exc), status_code=getattr(exc, "code", None)) from exc

        return (response.text or "").strip()
