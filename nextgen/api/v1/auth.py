from fastapi import APIRouter, Request, status

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import ai_rate_limit, rate_limit
from nextgen.schemas.auth import LoginRequest, OTPRequest, OTPVerifyRequest, SignupRequest
from nextgen.services import auth_service, otp_service

router = APIRouter()


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def signup(request: Request, payload: SignupRequest):
    _ = request
    try:
        return auth_service.signup(payload.email, payload.password, payload.full_name)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.post("/auth/login")
@rate_limit()
async def login(request: Request, payload: LoginRequest):
    _ = request
    try:
        return auth_service.login(payload.email, payload.password)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.post("/auth/otp/request")
@ai_rate_limit()
async def request_otp(request: Request, payload: OTPRequest):
    _ = request
    try:
        return otp_service.request_code(payload.email, payload.purpose)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc, fallback="Failed to send OTP")


@router.post("/auth/otp/verify")
@rate_limit()
async def verify_otp(request: Request, payload: OTPVerifyRequest):
    _ = request
    try:
        return otp_service.verify_code(payload.email, payload.purpose, payload.code)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)
