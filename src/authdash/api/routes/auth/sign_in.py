"""Email and username sign-in routes."""

from typing import Any

from fastapi import APIRouter, Request, Response

from authdash.api.cookies import start_session
from authdash.api.deps import SettingsDep
from authdash.auth import (
    AuthResponse,
    SessionDep,
    SignInEmail,
    SignInUsername,
    authenticate,
)
from authdash.core.exceptions import AuthenticationError
from authdash.core.logging import get_logger
from authdash.core.rate_limit import SIGN_IN_RATE_LIMIT, limiter

router = APIRouter()
logger = get_logger(__name__)


@router.post("/sign-in/email", response_model=AuthResponse)
@limiter.limit(SIGN_IN_RATE_LIMIT)
def sign_in_email(
    request: Request,  # Required for rate limiter
    response: Response,
    session: SessionDep,
    settings: SettingsDep,
    body: SignInEmail,
) -> Any:
    """Sign in with email and password.

    Sets the session cookie. Unknown emails, wrong passwords and inactive
    accounts all get the same 401 so the response does not reveal which
    one it was.
    """
    user = authenticate(session=session, email=body.email, password=body.password)
    if not user or not user.is_active:
        logger.info("sign_in_failed", method="email", email=body.email)
        raise AuthenticationError(
            "Invalid email or password", error_code="INVALID_EMAIL_OR_PASSWORD"
        )

    logger.info("user_signed_in", method="email", user_id=str(user.id))
    return start_session(
        request=request,
        response=response,
        session=session,
        settings=settings,
        user=user,
        remember_me=body.remember_me,
        callback_url=body.callback_url,
    )


@router.post("/sign-in/username", response_model=AuthResponse)
@limiter.limit(SIGN_IN_RATE_LIMIT)
def sign_in_username(
    request: Request,  # Required for rate limiter
    response: Response,
    session: SessionDep,
    settings: SettingsDep,
    body: SignInUsername,
) -> Any:
    """Sign in with username and password."""
    user = authenticate(session=session, username=body.username, password=body.password)
    if not user or not user.is_active:
        logger.info("sign_in_failed", method="username", username=body.username)
        raise AuthenticationError(
            "Invalid username or password", error_code="INVALID_USERNAME_OR_PASSWORD"
        )

    logger.info("user_signed_in", method="username", user_id=str(user.id))
    return start_session(
        request=request,
        response=response,
        session=session,
        settings=settings,
        user=user,
        remember_me=body.remember_me,
        callback_url=body.callback_url,
    )
