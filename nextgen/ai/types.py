from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class Attachment:
    data: bytes
    mime_type: str


class AIProviderError(RuntimeError):
    """Upstream model call failed; ``status_code`` mirrors the provider's HTTP status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def overloaded(self) -> bool:
        return self.status_code == 503


class AIConfigurationError(RuntimeError):
    pass


class AIResponseError(RuntimeError):
    def __init__(self, message: str, *, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class AIClient(Protocol):
    supports_documents: bool

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: Optional[str] = None,
        json_schema: Optional[dict[str, Any]] = None,
        attachments: Sequence[Attachment] = (),
    ) -> str: ...
