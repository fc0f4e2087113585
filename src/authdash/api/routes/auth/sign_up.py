"""Account registration routes."""

from typing import Any

from fastapi import APIRouter, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from authdash.api.cookies import start_session
from authdash.api.deps import SettingsDep
from authdash.auth import (
    AuthResponse,
    SessionDep,
    SignUpEmail,
    UserCreate,
    create_user,
    get_user_by_email,
    get_user_by_username,
)
from authdash.core.exceptions import ResourceExistsError
from authdash.core.logging import get_logger
from authdash.core.rate_limit import SIGN_UP_RATE_LIMIT, limiter

router = APIRouter()
logger = get_logger(__name__)

EMAIL_TAKEN_MESSAGE = "User already exists. Use another email."
USERNAME_TAKEN_MESSAGE = "Username is already taken. Please try another."


def _ensure_available(*, session: Session, body: SignUpEmail) -> None:
    if get_user_by_email(session=session, email=body.email):
        raise ResourceExistsError("User", "email", message=EMAIL_TAKEN_MESSAGE)
    if body.username and get_user_by_username(session=session, username=body.username):
        raise ResourceExistsError("Username", "username", message=USERNAME_TAKEN_MESSAGE)


@router.post("/sign-up/email", response_model=AuthResponse)
@limiter.limit(SIGN_UP_RATE_LIMIT)
def sign_up_email(
    request: Request,  # Required for rate limiter
    response: Response,
    session: SessionDep,
    settings: SettingsDep,
    body: SignUpEmail,
) -> Any:
    """Create a new account and sign it in.

    Email and username uniqueness are case-insensitive.
    """
    _ensure_available(session=session, body=body)

    user_create = UserCreate.model_validate(body)
    try:
        user = create_user(session=session, user_create=user_create)
    except IntegrityError as e:
        # Lost a race with a concurrent sign-up; the winner's row is visible now
        session.rollback()
        logger.warning("sign_up_conflict", email=body.email, error=str(e.orig))
        _ensure_available(session=session, body=body)
        raise ResourceExistsError("User", "email", message=EMAIL_TAKEN_MESSAGE) from e

    logger.info("user_signed_up", user_id=str(user.id), has_username=bool(user.username))
    return start_session(
        request=request,
        response=response,
        session=session,
        settings=settings,
        user=user,
        remember_me=body.remember_me,
        callback_url=body.callback_url,
    )
