"""Base models and mixins for SQLModel schemas.

Usage:
    - Database models (table=True) inherit from composed base classes
    - Response schemas use TimestampResponseMixin for timestamp fields

Example:
    class User(UserBase, TimestampedTable, table=True):
        ...
"""

from datetime import UTC, datetime
import uuid

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class UUIDPrimaryKeyMixin(SQLModel):
    """Standard UUID primary key for all models."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


class TimestampMixin(SQLModel):
    """Created/updated timestamps for audit trail."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class UserScopedMixin(SQLModel):
    """For models scoped to a single user (required)."""

    user_id: uuid.UUID = Field(
        foreign_key="user.id", nullable=False, ondelete="CASCADE", index=True
    )


class TimestampedTable(UUIDPrimaryKeyMixin, TimestampMixin):
    """Base for tables with timestamps.

    Use for: User, AuthSession
    """

    pass


class TimestampResponseMixin(SQLModel):
    """For Public/Response schemas that include timestamps."""

    created_at: datetime
    updated_at: datetime
