from fastapi import APIRouter, Query, Request

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.services import jobs_service

router = APIRouter()


@router.get("/jobs")
@rate_limit()
async def list_jobs(
    request: Request,
    search: str | None = Query(default=None, max_length=200),
    type: str | None = Query(default=None, max_length=200),
    location: str | None = Query(default=None, max_length=500),
    user_id: str | None = Query(default=None, max_length=64),
):
    _ = request
    return jobs_service.list_jobs(search=search, job_type=type, location=location, user_id=user_id)


@router.get("/jobs/{job_id}")
@rate_limit()
async def get_job(request: Request, job_id: int, user_id: str | None = Query(default=None, max_length=64)):
    _ = request
    try:
        return jobs_service.get_job(job_id, user_id=user_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
