from __future__ import annotations

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str | None = Field(default=None, max_length=8000)
    sessionId: str | None = None


class ApplicationCreate(BaseModel):
    job_id: int
    notes: str | None = Field(default=None, max_length=2000)


class ApplicationStatusUpdate(BaseModel):
    status: str
