import logging

from jinja2 import TemplateError

from app.platform.config import settings
from app.platform.services.email import EmailDeliveryError, render_template, send_email

logger = logging.getLogger(__name__)


def send_password_reset_code(to_email: str, name: str, code: str) -> bool:
    """
    Email a password reset code. Runs as a background task, so rendering and
    delivery failures are logged instead of raised; the stored code stays valid.
    """
    try:
        body = render_template(
            "password_reset_code.html",
            name=name,
            code=code,
            expires_in_minutes=settings.RESET_CODE_TTL_MINUTES,
        )
        send_email(to_email, f"{settings.APP_NAME} password reset code", body)
    except (EmailDeliveryError, TemplateError) as e:
        logger.error(f"Failed to send password reset code to {to_email}: {e}")
        return False

    logger.info(f"Password reset code sent to {to_email}")
    return True
