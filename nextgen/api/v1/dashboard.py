from fastapi import APIRouter, Request

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.services.dashboard_service import build_dashboard

router = APIRouter()


@router.get("/dashboard/{user_id}")
@rate_limit()
async def dashboard(request: Request, user_id: str):
    _ = request
    try:
        return build_dashboard(user_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
