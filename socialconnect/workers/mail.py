"""Celery task delivering password reset mail over SMTP."""
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from socialconnect.core.celery_app import celery_app
from socialconnect.core.config import settings

logger = logging.getLogger(__name__)


def _smtp_configured() -> bool:
    return bool(settings.SMTP_HOST and settings.SMTP_PORT and settings.SMTP_FROM)


def build_reset_message(to_email: str, token: str) -> EmailMessage:
    link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
    msg = EmailMessage()
    msg["From"] = formataddr((settings.SMTP_FROM_NAME, settings.SMTP_FROM or ""))
    msg["To"] = to_email
    msg["Subject"] = "Reset your SocialConnect password"
    msg.set_content(
        "We received a request to reset your password.\n\n"
        f"Open this link to choose a new one (valid for {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes):\n"
        f"{link}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    return msg


@celery_app.task
def send_password_reset_email(to_email: str, token: str) -> bool:
    """Send the reset link. Returns False when SMTP is not configured."""
    if not _smtp_configured():
        logger.warning("SMTP is not configured; password reset mail for %s not sent", to_email)
        return False
    msg = build_reset_message(to_email, token)
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USER and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.send_message(msg)
    logger.info("Password reset mail sent to %s", to_email)
    return True
