import logging

from fastapi import APIRouter, HTTPException, Request, status

from nextgen.core.rate_limit import ai_rate_limit
from nextgen.integrations.email import EmailDeliveryError, EmailNotConfiguredError, send_otp_email
from nextgen.schemas.auth import SendOTPEmailRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/email/send-otp")
@ai_rate_limit()
async def send_otp(request: Request, payload: SendOTPEmailRequest):
    _ = request
    if not payload.email or not payload.otp:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and OTP are required")
    try:
        send_otp_email(payload.email, payload.otp, payload.type)
    except EmailNotConfiguredError as exc:
        logger.error("smtp_not_configured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Email service not configured",
        ) from exc
    except EmailDeliveryError as exc:
        logger.error("otp_email_failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send OTP",
        ) from exc
    return {"success": True, "message": "OTP sent successfully"}
