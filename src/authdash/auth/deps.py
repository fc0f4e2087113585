from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from authdash.auth.crud import get_user_by_id, get_valid_session
from authdash.auth.models import AuthSession, User
from authdash.core.config import settings
from authdash.core.db import get_db
from authdash.core.exceptions import AuthenticationError

SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_session(
    request: Request, session: SessionDep
) -> tuple[AuthSession, User] | None:
    """Resolve the session cookie to (session, user), or None.

    A cookie pointing at an expired session, a deleted session or an
    inactive user resolves to None.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    auth_session = get_valid_session(session=session, token=token)
    if auth_session is None:
        return None

    user = get_user_by_id(session=session, user_id=auth_session.user_id)
    if user is None or not user.is_active:
        return None
    return auth_session, user


OptionalSessionDep = Annotated[
    tuple[AuthSession, User] | None, Depends(get_optional_session)
]


def get_current_session(current: OptionalSessionDep) -> tuple[AuthSession, User]:
    """Like get_optional_session, but a missing session is an error.

    Raises:
        AuthenticationError: If no valid session cookie was sent
    """
    if current is None:
        raise AuthenticationError("Unauthorized", error_code="UNAUTHORIZED")
    return current


CurrentSessionDep = Annotated[tuple[AuthSession, User], Depends(get_current_session)]
