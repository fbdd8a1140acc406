"""Resume upload, LLM parsing and application of parsed data to the profile."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import ValidationError

from nextgen.ai.config import load_ai_config
from nextgen.ai.factory import get_ai_client
from nextgen.ai.fallback import generate_with_fallback, parse_json_object
from nextgen.ai.types import Attachment, ChatMessage
from nextgen.core.config import settings
from nextgen.db import education as education_db
from nextgen.db import experience as experience_db
from nextgen.db import resumes as resumes_db
from nextgen.db import users as users_db
from nextgen.db.connection import transaction
from nextgen.integrations import storage
from nextgen.parsing.models import MIME_TYPES
from nextgen.parsing.parse import UnsupportedDocumentError, detect_source_type, parse_document
from nextgen.schemas.resume import (
    RESUME_PARSE_INSTRUCTIONS,
    RESUME_RESPONSE_SCHEMA,
    ParsedResume,
)
from nextgen.services.errors import ConflictError, InvalidRequestError, NotFoundError, ServiceError
from nextgen.services.file_security import safe_object_name, validate_upload_signature
from nextgen.services.profile_service import replace_skills

logger = logging.getLogger(__name__)

# Gemini reads these inline; anything else goes to the model as extracted text.
INLINE_TYPES = ("pdf", "txt")


class ResumeParseError(ServiceError):
    pass


def upload_resume(user_id: str, file_name: str, content: bytes) -> dict[str, Any]:
    if not users_db.user_exists(user_id):
        raise NotFoundError("User not found")
    if not content:
        raise InvalidRequestError("Uploaded file is empty")
    if len(content) > settings.max_upload_bytes:
        raise ServiceError(
            f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            status_code=413,
        )
    try:
        ext = validate_upload_signature(filename=file_name, content=content)
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from exc

    object_path = f"{user_id}/{int(time.time() * 1000)}_{safe_object_name(file_name)}"
    storage.upload(settings.resume_bucket, object_path, content)

    try:
        row = resumes_db.insert_resume(
            user_id,
            file_name=file_name,
            file_path=object_path,
            file_type=ext,
            file_size=len(content),
        )
    except Exception:
        storage.remove(settings.resume_bucket, object_path)
        raise
    logger.info("resume_uploaded user_id=%s resume_id=%s bytes=%s", user_id, row.get("resume_id"), len(content))
    return row


def list_resumes(user_id: str) -> list[dict[str, Any]]:
    return resumes_db.list_resumes(user_id)


def _parse_messages(content: bytes, file_path: str, supports_documents: bool) -> tuple[list[ChatMessage], list[Attachment]]:
    source_type = detect_source_type(file_path)
    if supports_documents and source_type in INLINE_TYPES:
        attachment = Attachment(data=content, mime_type=MIME_TYPES[source_type])
        return [ChatMessage(role="user", content=RESUME_PARSE_INSTRUCTIONS)], [attachment]

    doc = parse_document(content, file_path)
    if not doc.text.strip():
        warning = "; ".join(doc.parsing_warnings) or "No extractable text found."
        raise ResumeParseError(f"Could not read resume text: {warning}")
    prompt = f"{RESUME_PARSE_INSTRUCTIONS}\n\nResume text:\n{doc.text}"
    return [ChatMessage(role="user", content=prompt)], []


async def parse_resume(resume_id: int | None, file_path: str | None) -> dict[str, Any]:
    if not resume_id or not file_path:
        raise InvalidRequestError("resume_id and file_path are required")

    resume = resumes_db.get_resume(resume_id)
    if resume is None:
        raise NotFoundError("Resume not found")
    stored_path = resume["file_path"]
    if file_path != stored_path:
        raise InvalidRequestError("file_path does not match the resume")

    started = time.perf_counter()
    resumes_db.mark_status(resume_id, "processing")
    try:
        try:
            content = storage.download(settings.resume_bucket, stored_path)
        except storage.StorageError as exc:
            raise ResumeParseError(f"Failed to download file from storage: {exc}") from exc

        cfg = load_ai_config()
        client = get_ai_client()
        try:
            messages, attachments = _parse_messages(content, stored_path, client.supports_documents)
        except UnsupportedDocumentError as exc:
            raise ResumeParseError(str(exc)) from exc

        text, model_used = await generate_with_fallback(
            client,
            messages,
            primary=cfg.primary_model,
            fallback=cfg.fallback_model,
            attempts=cfg.retry_attempts,
            backoff_s=cfg.retry_backoff_s,
            json_schema=RESUME_RESPONSE_SCHEMA,
            attachments=attachments,
        )

        try:
            parsed = ParsedResume.model_validate(parse_json_object(text))
        except ValidationError as exc:
            raise ResumeParseError(f"Parsed resume did not match the schema: {exc}") from exc
    except Exception:
        resumes_db.mark_status(resume_id, "failed")
        raise

    data = parsed.model_dump()
    resumes_db.mark_parsed(resume_id, data, text)
    logger.info(
        json.dumps(
            {
                "event": "resume_parsed",
                "resume_id": resume_id,
                "model": model_used,
                "education": len(parsed.education),
                "experience": len(parsed.work_experience),
                "skills": len(parsed.skills),
                "duration_ms": int((time.perf_counter() - started) * 1000),
            }
        )
    )
    return {
        "success": True,
        "message": "Resume parsed successfully",
        "data": data,
        "resume_id": resume_id,
    }


def apply_parsed_resume(resume_id: int) -> dict[str, Any]:
    """Copy a completed parse into the owner's profile in one transaction."""
    resume = resumes_db.get_resume(resume_id)
    if resume is None:
        raise NotFoundError("Resume not found")
    if resume.get("parsing_status") != "completed" or not isinstance(resume.get("parsed_data"), dict):
        raise ConflictError("Resume has not been parsed yet")

    parsed = ParsedResume.model_validate(resume["parsed_data"])
    user_id = resume["user_id"]

    with transaction():
        user = users_db.patch_user(user_id, parsed.personal_info.model_dump())
        if user is None:
            raise NotFoundError("User not found")

        education_db.delete_all_education(user_id)
        for entry in parsed.education:
            if not entry.degree_title and not entry.institution_name:
                continue
            education_db.insert_education(user_id, entry.model_dump())

        experience_db.delete_all_experience(user_id)
        for entry in parsed.work_experience:
            if not entry.job_title and not entry.company_name:
                continue
            experience_db.insert_experience(user_id, entry.model_dump())

        skills_linked = replace_skills(user_id, parsed.skills, source="resume_parsed")

    logger.info("resume_applied resume_id=%s user_id=%s skills=%s", resume_id, user_id, skills_linked)
    return {
        "message": "Resume data applied to profile",
        "resume_id": resume_id,
        "user_id": user_id,
        "education": len(education_db.list_education(user_id)),
        "work_experience": len(experience_db.list_experience(user_id)),
        "skills": skills_linked,
    }
