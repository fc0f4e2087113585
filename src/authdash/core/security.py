from datetime import datetime, timedelta
import secrets

from passlib.context import CryptContext

from authdash.core.base_models import utcnow
from authdash.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_TOKEN_BYTES = 32

# Lifetime of a session created with "remember me" switched off
SHORT_SESSION_LIFETIME = timedelta(days=1)


def generate_session_token() -> str:
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def session_expiry(remember_me: bool = True, now: datetime | None = None) -> datetime:
    """Return when a session created now should expire."""
    now = now or utcnow()
    if remember_me:
        return now + timedelta(days=settings.SESSION_EXPIRE_DAYS)
    return now + SHORT_SESSION_LIFETIME


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
