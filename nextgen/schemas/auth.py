from __future__ import annotations

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=256)
    full_name: str | None = Field(default=None, max_length=200)


class LoginRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=256)


class OTPRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    purpose: str | None = None


class OTPVerifyRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    purpose: str | None = None
    code: str | None = Field(default=None, max_length=12)


class SendOTPEmailRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    otp: str | None = Field(default=None, max_length=12)
    type: str | None = None
