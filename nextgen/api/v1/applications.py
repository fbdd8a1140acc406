from fastapi import APIRouter, Request, status

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.schemas.chat import ApplicationCreate, ApplicationStatusUpdate
from nextgen.services import applications_service

router = APIRouter()


@router.get("/applications/{user_id}")
@rate_limit()
async def list_applications(request: Request, user_id: str):
    _ = request
    return applications_service.list_applications(user_id)


@router.post("/applications/{user_id}", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def apply(request: Request, user_id: str, payload: ApplicationCreate):
    _ = request
    try:
        return applications_service.apply_to_job(user_id, payload.job_id, payload.notes)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.patch("/applications/{user_id}/{application_id}")
@rate_limit()
async def update_status(request: Request, user_id: str, application_id: int, payload: ApplicationStatusUpdate):
    _ = request
    try:
        return applications_service.change_status(user_id, application_id, payload.status)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
