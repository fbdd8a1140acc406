from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import rate_limit
from nextgen.db import skills as skills_db
from nextgen.schemas.profile import SkillCatalogCreate
from nextgen.services import records_service

router = APIRouter()


@router.get("/skills-catalog")
@rate_limit()
async def list_catalog(request: Request):
    _ = request
    return skills_db.list_catalog()


@router.get("/skills-catalog/search")
@rate_limit()
async def search_catalog(
    request: Request,
    name: str | None = Query(default=None, max_length=200),
    query: str | None = Query(default=None, max_length=200),
):
    _ = request
    try:
        return records_service.search_catalog(name, query)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to search skill")


@router.post("/skills-catalog", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def create_catalog_skill(request: Request, payload: SkillCatalogCreate):
    _ = request
    try:
        skill, created = records_service.ensure_catalog_skill(payload.skill_name, payload.skill_category)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to create skill")
    if not created:
        return JSONResponse(status_code=status.HTTP_200_OK, content={"message": "Skill already exists", "skill": skill})
    return {"message": "Skill created successfully", "skill": skill}
