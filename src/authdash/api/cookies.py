"""Session cookie helpers shared by the sign-in, sign-up and sign-out routes."""

from fastapi import Request, Response
from sqlmodel import Session

from authdash.auth.crud import create_session
from authdash.auth.models import AuthResponse, AuthSession, User, UserPublic
from authdash.core.config import Settings


def client_details(request: Request) -> dict[str, str | None]:
    """IP address and user agent recorded on a new session row."""
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


def set_session_cookie(
    response: Response,
    auth_session: AuthSession,
    settings: Settings,
    *,
    remember_me: bool = True,
) -> None:
    """Attach the session token as an HttpOnly cookie.

    Without remember_me the cookie has no Max-Age and ends with the browser
    session, even though the row itself lives for a day.
    """
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=auth_session.token,
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60 if remember_me else None,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def start_session(
    *,
    request: Request,
    response: Response,
    session: Session,
    settings: Settings,
    user: User,
    remember_me: bool,
    callback_url: str | None,
) -> AuthResponse:
    """Create a session row for user, set its cookie and build the reply."""
    auth_session = create_session(
        session=session,
        user=user,
        remember_me=remember_me,
        **client_details(request),
    )
    set_session_cookie(response, auth_session, settings, remember_me=remember_me)
    return AuthResponse(
        redirect=bool(callback_url),
        url=callback_url,
        token=auth_session.token,
        user=UserPublic.model_validate(user),
    )
