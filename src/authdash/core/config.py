from functools import lru_cache
import os
import secrets
from typing import Annotated, Any, Literal
import warnings

from pydantic import (
    AnyUrl,
    BeforeValidator,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
)
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum recommended length for SECRET_KEY in characters
MIN_SECRET_KEY_LENGTH = 32


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    if isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    API_PREFIX: str = "/api/auth"
    PROJECT_NAME: str = "Auth Dashboard"
    DEBUG: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    FRONTEND_URL: str = "http://localhost:3000"

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def trusted_origins(self) -> list[str]:
        """Return every origin allowed to send credentialed requests."""
        origins = [str(origin).rstrip("/") for origin in self.CORS_ORIGINS]
        if self.FRONTEND_URL and self.FRONTEND_URL.rstrip("/") not in origins:
            origins.append(self.FRONTEND_URL.rstrip("/"))
        return origins

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "changethis"
    POSTGRES_DB: str = "app"

    # Full SQLAlchemy URL; takes precedence over the POSTGRES_* parts
    DATABASE_URL: str | None = None

    @field_validator("POSTGRES_PASSWORD", mode="after")
    @classmethod
    def validate_postgres_password(cls, v: str, info: ValidationInfo) -> str:
        """Validate that POSTGRES_PASSWORD is changed in production."""
        env = (
            info.data.get("ENVIRONMENT")
            if info.data
            else os.getenv("ENVIRONMENT", "local")
        )
        if v == "changethis" and env == "production":
            raise ValueError(
                "POSTGRES_PASSWORD must be changed from default value in production. "
                "Set a strong, unique password via the POSTGRES_PASSWORD environment variable."
            )
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Build the connection URI for SQLAlchemy."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(
            MultiHostUrl.build(
                scheme="postgresql+psycopg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    # SECRET_KEY signs password reset tokens.
    # If not set, a random key is generated (only suitable for development)
    SECRET_KEY: str = Field(default="", validate_default=True)
    ALGORITHM: str = "HS256"

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Validate and warn about SECRET_KEY configuration."""
        if not v:
            generated_key = secrets.token_urlsafe(MIN_SECRET_KEY_LENGTH)
            warnings.warn(
                "SECRET_KEY not set! Using a randomly generated key. "
                "This is only suitable for development. "
                "Set SECRET_KEY environment variable in production.",
                UserWarning,
                stacklevel=2,
            )
            return generated_key
        if len(v) < MIN_SECRET_KEY_LENGTH:
            warnings.warn(
                f"SECRET_KEY is shorter than {MIN_SECRET_KEY_LENGTH} characters. "
                "Consider using a longer key for better security.",
                UserWarning,
                stacklevel=2,
            )
        return v

    SESSION_COOKIE_NAME: str = "authdash.session_token"
    SESSION_EXPIRE_DAYS: int = 7
    # A session used after this many hours gets its expiry pushed forward
    SESSION_UPDATE_AGE_HOURS: int = 24

    @computed_field  # type: ignore[prop-decorator]
    @property
    def session_cookie_secure(self) -> bool:
        return self.ENVIRONMENT == "production"

    SMTP_TLS: bool = True
    SMTP_SSL: bool = False
    SMTP_PORT: int = 587
    SMTP_HOST: str | None = None
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    EMAILS_FROM_EMAIL: str | None = None
    EMAILS_FROM_NAME: str | None = None
    EMAIL_RESET_TOKEN_EXPIRE_HOURS: int = 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def emails_enabled(self) -> bool:
        """Check if email sending is properly configured."""
        return bool(self.SMTP_HOST and self.EMAILS_FROM_EMAIL)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
