from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the dashboard client, read from AUTHDASH_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHDASH_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    AUTH_BASE_URL: str = "http://localhost:3000"
    API_PREFIX: str = "/api/auth"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # How long the forgot-password confirmation stays up before redirecting
    SUCCESS_REDIRECT_DELAY_SECONDS: float = 2.0
    RESET_PASSWORD_REDIRECT: str = "/reset-password"

    # Accept a username as well as an email on the login form
    USERNAME_SIGN_IN: bool = True

    DEBUG: bool = False
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
