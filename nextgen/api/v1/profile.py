from fastapi import APIRouter, Request, status

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.db import education as education_db
from nextgen.db import experience as experience_db
from nextgen.db import skills as skills_db
from nextgen.schemas.profile import (
    EducationRecord,
    ExperienceRecord,
    ProfileUpdateRequest,
    SkillNamesRequest,
    UserSkillCreate,
    UserSkillUpdate,
)
from nextgen.services import profile_service

router = APIRouter()


@router.get("/profile/{user_id}")
@rate_limit()
async def get_profile(request: Request, user_id: str):
    _ = request
    try:
        return profile_service.get_profile(user_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.put("/profile/{user_id}")
@rate_limit()
async def replace_profile(request: Request, user_id: str, payload: ProfileUpdateRequest):
    _ = request
    try:
        return profile_service.replace_profile(user_id, payload.as_payload())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.put("/profile/{user_id}/skills")
@rate_limit()
async def replace_skills(request: Request, user_id: str, payload: SkillNamesRequest):
    _ = request
    try:
        linked = profile_service.update_skill_names(user_id, payload.skills)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Skills updated successfully", "count": linked}


@router.get("/profile/{user_id}/skills")
@rate_limit()
async def list_skills(request: Request, user_id: str):
    _ = request
    return skills_db.list_user_skills(user_id)


@router.post("/profile/{user_id}/skills", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def add_skill(request: Request, user_id: str, payload: UserSkillCreate):
    _ = request
    try:
        skill = profile_service.add_user_skill(
            user_id,
            payload.skill_name or "",
            proficiency_level=payload.proficiency_level,
            years_of_experience=payload.years_of_experience,
        )
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Skill added successfully", "skill": skill}


@router.put("/profile/{user_id}/skills/{user_skill_id}")
@rate_limit()
async def update_skill(request: Request, user_id: str, user_skill_id: int, payload: UserSkillUpdate):
    _ = request
    try:
        skill = profile_service.edit_user_skill(
            user_id,
            user_skill_id,
            proficiency_level=payload.proficiency_level,
            years_of_experience=payload.years_of_experience,
        )
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Skill updated successfully", "skill": skill}


@router.delete("/profile/{user_id}/skills/{user_skill_id}")
@rate_limit()
async def delete_skill(request: Request, user_id: str, user_skill_id: int):
    _ = request
    try:
        profile_service.remove_user_skill(user_id, user_skill_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Skill deleted successfully"}


@router.get("/profile/{user_id}/education")
@rate_limit()
async def list_education(request: Request, user_id: str):
    _ = request
    return education_db.list_education(user_id)


@router.post("/profile/{user_id}/education", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def add_education(request: Request, user_id: str, payload: EducationRecord):
    _ = request
    try:
        education = profile_service.add_education(user_id, payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Education added successfully", "education": education}


@router.put("/profile/{user_id}/education/{education_id}")
@rate_limit()
async def update_education(request: Request, user_id: str, education_id: int, payload: EducationRecord):
    _ = request
    try:
        education = profile_service.edit_education(user_id, education_id, payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Education updated successfully", "education": education}


@router.delete("/profile/{user_id}/education/{education_id}")
@rate_limit()
async def delete_education(request: Request, user_id: str, education_id: int):
    _ = request
    try:
        profile_service.remove_education(user_id, education_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Education deleted successfully"}


@router.get("/profile/{user_id}/experience")
@rate_limit()
async def list_experience(request: Request, user_id: str):
    _ = request
    return experience_db.list_experience(user_id)


@router.post("/profile/{user_id}/experience", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def add_experience(request: Request, user_id: str, payload: ExperienceRecord):
    _ = request
    try:
        experience = profile_service.add_experience(user_id, payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Work experience added successfully", "experience": experience}


@router.put("/profile/{user_id}/experience/{experience_id}")
@rate_limit()
async def update_experience(request: Request, user_id: str, experience_id: int, payload: ExperienceRecord):
    _ = request
    try:
        experience = profile_service.edit_experience(user_id, experience_id, payload.model_dump())
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Work experience updated successfully", "experience": experience}


@router.delete("/profile/{user_id}/experience/{experience_id}")
@rate_limit()
async def delete_experience(request: Request, user_id: str, experience_id: int):
    _ = request
    try:
        profile_service.remove_experience(user_id, experience_id)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
    return {"message": "Work experience deleted successfully"}
