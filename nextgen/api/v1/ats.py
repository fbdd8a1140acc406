from fastapi import APIRouter, HTTPException, Request, status

from nextgen.ai.types import AIResponseError
from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import ai_rate_limit, rate_limit
from nextgen.services import ats_service

router = APIRouter()


@router.post("/ats/{user_id}")
@ai_rate_limit()
async def generate_ats(request: Request, user_id: str):
    _ = request
    try:
        return await ats_service.generate_report(user_id)
    except AIResponseError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to parse ATS response",
        ) from exc
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to generate ATS score")


@router.get("/ats/{user_id}")
@rate_limit()
async def latest_ats(request: Request, user_id: str):
    _ = request
    try:
        return ats_service.latest_report(user_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to fetch ATS report")
