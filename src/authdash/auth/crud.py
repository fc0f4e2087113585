from datetime import datetime, timedelta
from functools import lru_cache
import secrets
import uuid

from sqlmodel import Session, select

from authdash.auth.models import AuthSession, User, UserCreate
from authdash.core.base_models import as_utc, utcnow
from authdash.core.config import settings
from authdash.core.security import (
    generate_session_token,
    get_password_hash,
    session_expiry,
    verify_password,
)


def create_user(*, session: Session, user_create: UserCreate) -> User:
    """Create a new user in the database.

    Email and username are stored lower-cased; the username as typed is
    kept for display.
    """
    db_obj = User(
        name=user_create.name,
        email=user_create.email.lower(),
        username=user_create.username.lower() if user_create.username else None,
        display_username=user_create.username,
        hashed_password=get_password_hash(user_create.password),
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email.lower())
    return session.exec(statement).first()


def get_user_by_username(*, session: Session, username: str) -> User | None:
    statement = select(User).where(User.username == username.lower())
    return session.exec(statement).first()


def get_user_by_id(*, session: Session, user_id: uuid.UUID) -> User | None:
    return session.get(User, user_id)


def update_password(*, session: Session, user: User, new_password: str) -> User:
    user.hashed_password = get_password_hash(new_password)
    user.password_changed_at = utcnow()
    user.updated_at = user.password_changed_at
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


# Hash checked when the account does not exist, so a miss costs as much as a hit
@lru_cache
def _dummy_hash() -> str:
    return get_password_hash(secrets.token_urlsafe(16))


def authenticate(
    *,
    session: Session,
    password: str,
    email: str | None = None,
    username: str | None = None,
) -> User | None:
    """Authenticate a user by email or username and password.

    Always performs one password verification so that response time does
    not reveal whether the account exists.

    Returns:
        User object if credentials are valid, None otherwise
    """
    if email is not None:
        db_user = get_user_by_email(session=session, email=email)
    elif username is not None:
        db_user = get_user_by_username(session=session, username=username)
    else:
        raise ValueError("authenticate() needs an email or a username")

    if not db_user:
        verify_password(password, _dummy_hash())
        return None

    if not verify_password(password, db_user.hashed_password):
        return None

    return db_user


def create_session(
    *,
    session: Session,
    user: User,
    remember_me: bool = True,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AuthSession:
    auth_session = AuthSession(
        user_id=user.id,
        token=generate_session_token(),
        expires_at=session_expiry(remember_me),
        ip_address=ip_address,
        user_agent=user_agent,
    )
    session.add(auth_session)
    session.commit()
    session.refresh(auth_session)
    return auth_session


def get_valid_session(
    *, session: Session, token: str, now: datetime | None = None
) -> AuthSession | None:
    """Look up a session by cookie token.

    Expired rows are deleted on sight. A session older than
    SESSION_UPDATE_AGE_HOURS since its last refresh gets a new expiry.
    """
    now = now or utcnow()
    auth_session = session.exec(
        select(AuthSession).where(AuthSession.token == token)
    ).first()
    if auth_session is None:
        return None

    if as_utc(auth_session.expires_at) <= now:
        session.delete(auth_session)
        session.commit()
        return None

    update_age = timedelta(hours=settings.SESSION_UPDATE_AGE_HOURS)
    if now - as_utc(auth_session.updated_at) >= update_age:
        auth_session.expires_at = session_expiry(True, now=now)
        auth_session.updated_at = now
        session.add(auth_session)
        session.commit()
        session.refresh(auth_session)

    return auth_session


def delete_session(*, session: Session, token: str) -> bool:
    auth_session = session.exec(
        select(AuthSession).where(AuthSession.token == token)
    ).first()
    if auth_session is None:
        return False
    session.delete(auth_session)
    session.commit()
    return True


def delete_user_sessions(*, session: Session, user_id: uuid.UUID) -> None:
    statement = select(AuthSession).where(AuthSession.user_id == user_id)
    for auth_session in session.exec(statement).all():
        session.delete(auth_session)
    session.commit()


def list_user_sessions(*, session: Session, user_id: uuid.UUID) -> list[AuthSession]:
    """Unexpired sessions of a user, newest first."""
    statement = (
        select(AuthSession)
        .where(AuthSession.user_id == user_id)
        .order_by(AuthSession.created_at.desc())  # type: ignore[attr-defined]
    )
    now = utcnow()
    return [s for s in session.exec(statement).all() if as_utc(s.expires_at) > now]
