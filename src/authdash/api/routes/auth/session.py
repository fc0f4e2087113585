"""Session lookup, listing and sign-out routes."""

from typing import Any

from fastapi import APIRouter, Request, Response

from authdash.api.cookies import clear_session_cookie
from authdash.api.deps import SettingsDep
from authdash.auth import (
    CurrentSessionDep,
    OptionalSessionDep,
    SessionDep,
    SessionPublic,
    SessionResponse,
    SuccessResponse,
    UserPublic,
    delete_session,
    list_user_sessions,
)
from authdash.core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/get-session", response_model=SessionResponse | None)
def get_session(current: OptionalSessionDep) -> Any:
    """Return the session behind the request cookie, or null."""
    if current is None:
        return None
    auth_session, user = current
    return SessionResponse(
        session=SessionPublic.model_validate(auth_session),
        user=UserPublic.model_validate(user),
    )


@router.post("/sign-out", response_model=SuccessResponse)
def sign_out(
    request: Request,
    response: Response,
    session: SessionDep,
    settings: SettingsDep,
) -> Any:
    """Delete the current session row and clear its cookie.

    Succeeds even when no session cookie was sent.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token and delete_session(session=session, token=token):
        logger.info("user_signed_out")
    clear_session_cookie(response, settings)
    return SuccessResponse(success=True)


@router.get("/list-sessions", response_model=list[SessionPublic])
def list_sessions(session: SessionDep, current: CurrentSessionDep) -> Any:
    """List the signed-in user's active sessions (one per browser)."""
    _, user = current
    return list_user_sessions(session=session, user_id=user.id)
