from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from urllib.parse import urlencode, urlsplit

import emails
from jinja2 import Environment, FileSystemLoader, select_autoescape
import jwt

from authdash.core.config import settings
from authdash.core.exceptions import ExternalServiceError, ValidationError
from authdash.core.logging import get_logger

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "email-templates"

SMTP_TIMEOUT_SECONDS = 10

_template_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


@dataclass
class EmailData:
    html_content: str
    subject: str


def render_email_template(*, template_name: str, context: dict[str, Any]) -> str:
    template = _template_env.get_template(template_name)
    return template.render(context)


def send_email(
    *,
    email_to: str,
    subject: str = "",
    html_content: str = "",
) -> None:
    """Send an email through the configured SMTP relay.

    Raises:
        ExternalServiceError: If the relay does not accept the message
    """
    if not settings.emails_enabled:
        logger.warning("email_not_configured", email_to=email_to, subject=subject)
        return

    message = emails.Message(
        subject=subject,
        html=html_content,
        mail_from=(
            settings.EMAILS_FROM_NAME or settings.PROJECT_NAME,
            settings.EMAILS_FROM_EMAIL,
        ),
    )
    smtp_options: dict[str, Any] = {
        "host": settings.SMTP_HOST,
        "port": settings.SMTP_PORT,
        "timeout": SMTP_TIMEOUT_SECONDS,
    }
    if settings.SMTP_TLS:
        smtp_options["tls"] = True
    elif settings.SMTP_SSL:
        smtp_options["ssl"] = True
    if settings.SMTP_USER:
        smtp_options["user"] = settings.SMTP_USER
    if settings.SMTP_PASSWORD:
        smtp_options["password"] = settings.SMTP_PASSWORD

    response = message.send(to=email_to, smtp=smtp_options)
    # 250 is the SMTP "accepted" reply
    if response is None or response.status_code != 250:
        error = getattr(response, "error", None) or "message not accepted"
        logger.error("email_send_failed", email_to=email_to, error=str(error))
        raise ExternalServiceError("SMTP", str(error))

    logger.info("email_sent", email_to=email_to, subject=subject)


def resolve_redirect_url(redirect_to: str | None, **params: str) -> str:
    """Turn a redirect target into an absolute frontend URL.

    Relative paths are joined onto FRONTEND_URL; absolute URLs must point at
    one of the trusted origins.

    Raises:
        ValidationError: If the target points at an untrusted origin
    """
    target = redirect_to or "/"
    if target.startswith("/") and not target.startswith("//"):
        url = f"{settings.FRONTEND_URL.rstrip('/')}{target}"
    else:
        parts = urlsplit(target)
        origin = f"{parts.scheme}://{parts.netloc}"
        if origin not in settings.trusted_origins:
            raise ValidationError(
                "Invalid redirect URL",
                field="redirect_to",
                error_code="INVALID_REDIRECT_URL",
            )
        url = target
    if params:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode(params)}"
    return url


def generate_password_reset_token(
    email: str, password_changed_at: datetime | None
) -> str:
    """Generate a password reset token.

    The token includes a timestamp of when the password was last changed,
    which is used to invalidate the token after a password reset.
    """
    delta = timedelta(hours=settings.EMAIL_RESET_TOKEN_EXPIRE_HOURS)
    now = datetime.now(UTC)
    expires = now + delta
    # Use 0 if password_changed_at is None (user never changed password)
    pca_timestamp = password_changed_at.timestamp() if password_changed_at else 0
    return jwt.encode(
        {
            "exp": expires.timestamp(),
            "nbf": now.timestamp(),
            "sub": email,
            "pca": pca_timestamp,
            "purpose": "reset-password",
        },
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def verify_password_reset_token(token: str) -> tuple[str, float] | None:
    """Verify a password reset token.

    Returns:
        Tuple of (email, password_changed_at_timestamp) if token is valid, None otherwise
    """
    try:
        decoded_token = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        if decoded_token.get("purpose") != "reset-password":
            return None
        email = str(decoded_token["sub"])
        pca = float(decoded_token.get("pca", 0))
    except (jwt.InvalidTokenError, KeyError):
        return None
    else:
        return (email, pca)


def generate_password_reset_email(*, email_to: str, name: str, link: str) -> EmailData:
    project_name = settings.PROJECT_NAME
    subject = f"{project_name} - Reset your password"
    html_content = render_email_template(
        template_name="reset_password.html",
        context={
            "project_name": project_name,
            "name": name,
            "email": email_to,
            "valid_hours": settings.EMAIL_RESET_TOKEN_EXPIRE_HOURS,
            "link": link,
        },
    )
    return EmailData(html_content=html_content, subject=subject)
