from datetime import datetime
from typing import Annotated
import uuid

from pydantic import EmailStr, StringConstraints
from sqlmodel import Field, Relationship, SQLModel

from authdash.core.base_models import (
    TimestampedTable,
    TimestampResponseMixin,
    UserScopedMixin,
)

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = r"^[A-Za-z0-9_-]+$"

Username = Annotated[
    str,
    StringConstraints(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    ),
]


class UserBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    # Lower-cased login handle; the typed casing lives in display_username
    username: str | None = Field(
        default=None, unique=True, index=True, max_length=USERNAME_MAX_LENGTH
    )
    display_username: str | None = Field(default=None, max_length=USERNAME_MAX_LENGTH)
    email_verified: bool = False
    image: str | None = Field(default=None, max_length=500)
    is_active: bool = True


class User(UserBase, TimestampedTable, table=True):
    hashed_password: str
    # Only set explicitly on password change operations
    password_changed_at: datetime | None = Field(default=None)

    sessions: list["AuthSession"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class AuthSession(UserScopedMixin, TimestampedTable, table=True):
    """A signed-in browser, identified by the opaque token in its cookie."""

    __tablename__ = "session"

    token: str = Field(unique=True, index=True, max_length=255)
    expires_at: datetime
    ip_address: str | None = Field(default=None, max_length=64)
    user_agent: str | None = Field(default=None, max_length=500)

    user: User = Relationship(back_populates="sessions")


class UserCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    username: Username | None = None


class SignInEmail(SQLModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)
    callback_url: str | None = None
    remember_me: bool = True


class SignInUsername(SQLModel):
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)
    callback_url: str | None = None
    remember_me: bool = True


class SignUpEmail(UserCreate):
    callback_url: str | None = None
    remember_me: bool = True


class ForgetPassword(SQLModel):
    email: EmailStr = Field(max_length=255)
    redirect_to: str | None = None


class ResetPassword(SQLModel):
    token: str
    new_password: str = Field(
        min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )


class UserPublic(TimestampResponseMixin):
    id: uuid.UUID
    name: str
    email: str
    username: str | None = None
    display_username: str | None = None
    email_verified: bool
    image: str | None = None


class SessionPublic(TimestampResponseMixin):
    id: uuid.UUID
    user_id: uuid.UUID
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None


class SessionResponse(SQLModel):
    session: SessionPublic
    user: UserPublic


class AuthResponse(SQLModel):
    redirect: bool = False
    url: str | None = None
    token: str
    user: UserPublic


class StatusResponse(SQLModel):
    status: bool = True


class SuccessResponse(SQLModel):
    success: bool = True


User.model_rebuild()
