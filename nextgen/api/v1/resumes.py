from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.config import settings
from nextgen.core.rate_limit import ai_rate_limit, rate_limit
from nextgen.schemas.resume import ParseResumeRequest
from nextgen.services import resume_service

router = APIRouter()


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/resumes/upload/{user_id}", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def upload_resume(request: Request, user_id: str, file: UploadFile = File(...)):
    _ = request
    filename = file.filename or "resume"
    content = await _read_upload(file)
    try:
        resume = resume_service.upload_resume(user_id, filename, content)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to upload resume")
    return {"message": "Resume uploaded successfully", "resume": resume}


@router.get("/resumes/{user_id}")
@rate_limit()
async def list_resumes(request: Request, user_id: str):
    _ = request
    return resume_service.list_resumes(user_id)


@router.post("/resumes/parse")
@ai_rate_limit()
async def parse_resume(request: Request, payload: ParseResumeRequest):
    _ = request
    try:
        return await resume_service.parse_resume(payload.resume_id, payload.file_path)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to parse resume")


@router.post("/resumes/{resume_id}/apply")
@rate_limit()
async def apply_resume(request: Request, resume_id: int):
    _ = request
    try:
        return resume_service.apply_parsed_resume(resume_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to apply resume")
