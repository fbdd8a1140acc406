from fastapi import APIRouter, Request, status

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.schemas.profile import AddSkillRequest
from nextgen.services import profile_service, skills_service

router = APIRouter()


@router.get("/skills/{user_id}")
@rate_limit()
async def skills_overview(request: Request, user_id: str):
    _ = request
    try:
        return skills_service.skills_overview(user_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.post("/skills/{user_id}", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def add_skill(request: Request, user_id: str, payload: AddSkillRequest):
    _ = request
    try:
        return profile_service.add_user_skill(
            user_id,
            payload.skillName or "",
            proficiency_level=payload.proficiency or "beginner",
        )
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.delete("/skills/{user_id}/{user_skill_id}")
@rate_limit()
async def delete_skill(request: Request, user_id: str, user_skill_id: int):
    _ = request
    try:
        profile_service.remove_user_skill(user_id, user_skill_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Skill deleted successfully"}
