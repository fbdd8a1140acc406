from fastapi import APIRouter, Request

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.schemas.profile import UserUpdateRequest
from nextgen.services import records_service

router = APIRouter()


@router.put("/users/{user_id}")
@rate_limit()
async def update_user(request: Request, user_id: str, payload: UserUpdateRequest):
    _ = request
    try:
        user = records_service.update_user(user_id, payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to update user")
    return {"message": "User updated successfully", "user": user}
