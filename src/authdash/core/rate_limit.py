from slowapi import Limiter
from slowapi.util import get_remote_address

from authdash.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100/minute"] if settings.ENVIRONMENT != "local" else [],
    enabled=settings.ENVIRONMENT != "local",
)

SIGN_IN_RATE_LIMIT = "5/minute"

SIGN_UP_RATE_LIMIT = "5/minute"

PASSWORD_RESET_RATE_LIMIT = "3/minute"
