"""Password reset routes (request a link, set a new password)."""

from typing import Any

from fastapi import APIRouter, Request

from authdash.auth import (
    ForgetPassword,
    ResetPassword,
    SessionDep,
    StatusResponse,
    delete_user_sessions,
    get_user_by_email,
    update_password,
)
from authdash.core.base_models import as_utc
from authdash.core.config import settings
from authdash.core.exceptions import InvalidTokenError
from authdash.core.logging import get_logger
from authdash.core.rate_limit import PASSWORD_RESET_RATE_LIMIT, limiter
from authdash.core.utils import (
    generate_password_reset_email,
    generate_password_reset_token,
    resolve_redirect_url,
    send_email,
    verify_password_reset_token,
)

router = APIRouter()
logger = get_logger(__name__)


@router.post("/forget-password", response_model=StatusResponse)
@limiter.limit(PASSWORD_RESET_RATE_LIMIT)
def forget_password(
    request: Request,  # Required for rate limiter
    session: SessionDep,
    body: ForgetPassword,
) -> Any:
    """Request a password reset email.

    The link points at redirect_to on the frontend with the reset token as
    a query parameter. The token embeds the time of the last password
    change, so it stops working once any reset completes.

    Note: This endpoint always returns success to prevent user enumeration.
    Rate limited to prevent email flooding attacks.
    """
    # Reject untrusted targets before looking the user up
    resolve_redirect_url(body.redirect_to)

    user = get_user_by_email(session=session, email=body.email)
    if user and user.is_active:
        pca = as_utc(user.password_changed_at) if user.password_changed_at else None
        token = generate_password_reset_token(
            email=user.email, password_changed_at=pca
        )
        link = resolve_redirect_url(body.redirect_to, token=token)
        if settings.emails_enabled:
            email_data = generate_password_reset_email(
                email_to=user.email, name=user.name, link=link
            )
            send_email(
                email_to=user.email,
                subject=email_data.subject,
                html_content=email_data.html_content,
            )
        else:
            logger.info("password_reset_link", email=user.email, reset_link=link)
        logger.info("password_reset_requested", user_id=str(user.id))
    else:
        logger.info("password_reset_requested_unknown_email", email=body.email)

    return StatusResponse(status=True)


@router.post("/reset-password", response_model=StatusResponse)
def reset_password(session: SessionDep, body: ResetPassword) -> Any:
    """Set a new password using a reset token.

    A token is single use: completing a reset moves password_changed_at,
    which no longer matches the stamp inside older tokens. Every session of
    the user is revoked.
    """
    result = verify_password_reset_token(token=body.token)
    if not result:
        logger.warning("password_reset_invalid_token")
        raise InvalidTokenError()

    email, token_pca = result
    user = get_user_by_email(session=session, email=email)
    if not user or not user.is_active:
        logger.warning("password_reset_unknown_user", email=email)
        raise InvalidTokenError()

    current_pca = (
        as_utc(user.password_changed_at).timestamp() if user.password_changed_at else 0
    )
    if abs(current_pca - token_pca) > 1:
        logger.warning("password_reset_token_reused", user_id=str(user.id))
        raise InvalidTokenError("Token has already been used or is invalid")

    update_password(session=session, user=user, new_password=body.new_password)
    delete_user_sessions(session=session, user_id=user.id)
    logger.info("password_reset_completed", user_id=str(user.id))

    return StatusResponse(status=True)
