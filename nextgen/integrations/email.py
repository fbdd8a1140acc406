from __future__ import annotations

import html
import logging
import smtplib
import ssl
from email.message import EmailMessage

from nextgen.core.config import settings

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    pass


class EmailDeliveryError(RuntimeError):
    pass


def smtp_ready() -> bool:
    return bool(settings.smtp_host and settings.smtp_user and _smtp_password())


def _smtp_password() -> str | None:
    if not settings.smtp_password:
        return None
    # Gmail app passwords are often copied with spaces every 4 chars.
    return settings.smtp_password.replace(" ", "")


def _smtp_login_if_needed(server: smtplib.SMTP) -> None:
    if settings.smtp_user and _smtp_password():
        server.login(settings.smtp_user, _smtp_password())


def _send_via_smtp_with(host: str, port: int, use_tls: bool, msg: EmailMessage, context: ssl.SSLContext) -> None:
    if use_tls:
        with smtplib.SMTP(host, port, timeout=15) as server:
            server.starttls(context=context)
            _smtp_login_if_needed(server)
            server.send_message(msg)
        return

    with smtplib.SMTP_SSL(host, port, context=context, timeout=15) as server:
        _smtp_login_if_needed(server)
        server.send_message(msg)


def otp_subject(otp_type: str | None) -> str:
    if otp_type == "2fa_enable":
        return "Your 2FA Verification Code - NextGenAI"
    return "Your Login Verification Code - NextGenAI"


def otp_heading(otp_type: str | None) -> str:
    if otp_type == "2fa_enable":
        return "Enable Two-Factor Authentication"
    return "Login Verification"


def render_otp_html(code: str, otp_type: str | None, ttl_minutes: int) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: linear-gradient(135deg, #fbbf24 0%, #f59e0b 100%); padding: 20px;
               text-align: center; border-radius: 10px 10px 0 0; }}
    .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
    .otp-box {{ background: #fff; border: 2px solid #fbbf24; border-radius: 8px; padding: 20px;
                text-align: center; margin: 20px 0; }}
    .otp-code {{ font-size: 32px; font-weight: bold; color: #f59e0b; letter-spacing: 8px;
                 font-family: monospace; }}
    .footer {{ text-align: center; margin-top: 20px; color: #6b7280; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1 style="color: white; margin: 0;">NextGenAI</h1></div>
    <div class="content">
      <h2>{otp_heading(otp_type)}</h2>
      <p>Your verification code is:</p>
      <div class="otp-box"><div class="otp-code">{html.escape(code)}</div></div>
      <p>This code will expire in {ttl_minutes} minutes.</p>
      <p>If you didn't request this code, please ignore this email.</p>
      <div class="footer"><p>&copy; NextGenAI - AI-Powered Career Platform</p></div>
    </div>
  </div>
</body>
</html>
"""


def send_otp_email(recipient: str, code: str, otp_type: str | None = None) -> None:
    """Send a verification code; raises on missing configuration or delivery failure."""
    if not smtp_ready():
        logger.error("SMTP is not configured; set SMTP_USER and SMTP_PASSWORD.")
        raise EmailNotConfiguredError("Email service not configured. Please contact administrator.")

    sender = settings.smtp_from or settings.smtp_user or ""

    msg = EmailMessage()
    msg["Subject"] = otp_subject(otp_type)
    msg["From"] = sender
    msg["To"] = recipient
    msg.set_content(
        f"Your verification code is: {code}\n\n"
        f"This code will expire in {settings.otp_ttl_minutes} minutes.\n"
        "If you didn't request this code, please ignore this email."
    )
    msg.add_alternative(render_otp_html(code, otp_type, settings.otp_ttl_minutes), subtype="html")

    context = ssl.create_default_context()
    # Port 465 speaks implicit TLS; everything else upgrades with STARTTLS.
    use_tls = settings.smtp_use_tls and settings.smtp_port != 465
    primary_mode = "STARTTLS" if use_tls else "SSL"
    try:
        _send_via_smtp_with(
            host=settings.smtp_host,
            port=settings.smtp_port,
            use_tls=use_tls,
            msg=msg,
            context=context,
        )
        return
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception(
            "OTP email via SMTP failed (host=%s port=%s mode=%s): %s",
            settings.smtp_host,
            settings.smtp_port,
            primary_mode,
            exc,
        )
        if not settings.smtp_fallback_ssl:
            raise EmailDeliveryError("Failed to send OTP email") from exc

    fallback_port = 465 if use_tls else 587
    fallback_tls = not use_tls
    fallback_mode = "STARTTLS" if fallback_tls else "SSL"
    try:
        _send_via_smtp_with(
            host=settings.smtp_host,
            port=fallback_port,
            use_tls=fallback_tls,
            msg=msg,
            context=context,
        )
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception(
            "OTP email SMTP fallback failed (host=%s port=%s mode=%s): %s",
            settings.smtp_host,
            fallback_port,
            fallback_mode,
            exc,
        )
        raise EmailDeliveryError("Failed to send OTP email") from exc

    logger.info(
        "OTP email sent with SMTP fallback (host=%s port=%s mode=%s).",
        settings.smtp_host,
        fallback_port,
        fallback_mode,
    )
