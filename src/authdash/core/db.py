from collections.abc import Generator
from typing import Any

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from authdash.core.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # In-memory databases must share one connection across threads
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.DEBUG and settings.ENVIRONMENT == "local",
    **_engine_options(settings.SQLALCHEMY_DATABASE_URI),
)


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Create all tables that are not there yet.

    Production databases are migrated with Alembic; this is for local
    SQLite runs and tests.
    """
    # Registers the tables on SQLModel.metadata
    from authdash.auth import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
