import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from nextgen.api.v1.health import router as health_router
from nextgen.api.v1.auth import router as auth_router
from nextgen.api.v1.email import router as email_router
from nextgen.api.v1.profile import router as profile_router
from nextgen.api.v1.users import router as users_router
from nextgen.api.v1.records import router as records_router
from nextgen.api.v1.skills_catalog import router as skills_catalog_router
from nextgen.api.v1.skills import router as skills_router
from nextgen.api.v1.jobs import router as jobs_router
from nextgen.api.v1.applications import router as applications_router
from nextgen.api.v1.dashboard import router as dashboard_router
from nextgen.api.v1.chat import router as chat_router
from nextgen.api.v1.ats import router as ats_router
from nextgen.api.v1.resumes import router as resumes_router
from nextgen.core.cors import cors_allow_credentials, cors_allowed_origins
from nextgen.core.rate_limit import limiter
from nextgen.core.config import settings
from nextgen.core.security import require_api_key
from dotenv import load_dotenv
from nextgen.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="NextGenAI Career API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=cors_allow_credentials(),
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

protected = [Depends(require_api_key)]

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(auth_router, prefix="/api", tags=["Auth"], dependencies=protected)
app.include_router(email_router, prefix="/api", tags=["Email"], dependencies=protected)
app.include_router(profile_router, prefix="/api", tags=["Profile"], dependencies=protected)
app.include_router(users_router, prefix="/api", tags=["Users"], dependencies=protected)
app.include_router(records_router, prefix="/api", tags=["Records"], dependencies=protected)
app.include_router(skills_catalog_router, prefix="/api", tags=["Skills Catalog"], dependencies=protected)
app.include_router(skills_router, prefix="/api", tags=["Skills"], dependencies=protected)
app.include_router(jobs_router, prefix="/api", tags=["Jobs"], dependencies=protected)
app.include_router(applications_router, prefix="/api", tags=["Applications"], dependencies=protected)
app.include_router(dashboard_router, prefix="/api", tags=["Dashboard"], dependencies=protected)
app.include_router(chat_router, prefix="/api", tags=["Chat"], dependencies=protected)
app.include_router(ats_router, prefix="/api", tags=["ATS"], dependencies=protected)
app.include_router(resumes_router, prefix="/api", tags=["Resumes"], dependencies=protected)
