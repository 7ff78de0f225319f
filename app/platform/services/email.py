import os
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger("email_service")

current_dir = os.path.dirname(os.path.abspath(__file__))
template_dir = os.path.join(current_dir, "../../features/auth/template")

if not os.path.exists(template_dir):
    template_dir = os.path.join(os.getcwd(), "app/features/auth/template")

env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the SMTP server."""


def render_template(template_name: str, **context) -> str:
    return env.get_template(template_name).render(app_name=settings.APP_NAME, **context)


def send_email(to_email: str, subject: str, body: str) -> None:
    """Send an HTML email via SMTP (SSL on port 465, STARTTLS otherwise)."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.MAIL_FROM_NAME} <{settings.MAIL_FROM_ADDRESS}>"
    msg["To"] = to_email
    msg.attach(MIMEText(body, "html"))

    port = settings.MAIL_PORT
    try:
        if port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(settings.MAIL_HOST, port, context=context) as server:
                server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
                server.sendmail(settings.MAIL_FROM_ADDRESS, to_email, msg.as_string())
        else:
            with smtplib.SMTP(settings.MAIL_HOST, port) as server:
                server.ehlo()
                if str(settings.MAIL_ENCRYPTION).upper() in ["TLS", "TRUE"]:
                    server.starttls()
                    server.ehlo()
                server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
                server.sendmail(settings.MAIL_FROM_ADDRESS, to_email, msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        raise EmailDeliveryError(f"SMTP delivery failed: {e}") from e

    logger.info(f"Email sent via SMTP to {to_email}")
