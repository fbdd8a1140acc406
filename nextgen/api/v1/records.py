from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.schemas.profile import EducationCreateRequest, UserSkillLinkRequest, WorkExperienceCreateRequest
from nextgen.services import records_service

router = APIRouter()


@router.delete("/education/user/{user_id}")
@rate_limit()
async def delete_user_education(request: Request, user_id: str):
    _ = request
    records_service.clear_education(user_id)
    return {"message": "Education records deleted successfully"}


@router.post("/education", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def create_education(request: Request, payload: EducationCreateRequest):
    _ = request
    try:
        education = records_service.create_education(payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to add education")
    return {"message": "Education added successfully", "education": education}


@router.delete("/work-experience/user/{user_id}")
@rate_limit()
async def delete_user_experience(request: Request, user_id: str):
    _ = request
    records_service.clear_experience(user_id)
    return {"message": "Work experience records deleted successfully"}


@router.post("/work-experience", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def create_experience(request: Request, payload: WorkExperienceCreateRequest):
    _ = request
    try:
        experience = records_service.create_experience(payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to add work experience")
    return {"message": "Work experience added successfully", "experience": experience}


@router.delete("/user-skills/user/{user_id}")
@rate_limit()
async def delete_user_skills(request: Request, user_id: str):
    _ = request
    records_service.clear_user_skills(user_id)
    return {"message": "User skills deleted successfully"}


@router.post("/user-skills", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def create_user_skill(request: Request, payload: UserSkillLinkRequest):
    _ = request
    try:
        user_skill = records_service.link_user_skill(payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to add user skill")
    if user_skill is None:
        return JSONResponse(status_code=status.HTTP_200_OK, content={"message": "Skill already exists for this user"})
    return {"message": "User skill added successfully", "userSkill": user_skill}
