"""Pre-start script: wait for the database, then make sure tables exist.

Usage:
    python -m authdash.scripts.prestart

Postgres schemas are managed by Alembic (`alembic upgrade head`); SQLite
databases used for local runs get their tables created directly.
"""

import logging

from sqlalchemy import Engine
from sqlmodel import Session, select
from tenacity import after_log, before_log, retry, stop_after_attempt, wait_fixed

from authdash.core.config import settings
from authdash.core.db import engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

max_tries = 60 * 5  # 5 minutes
wait_seconds = 1


@retry(
    stop=stop_after_attempt(max_tries),
    wait=wait_fixed(wait_seconds),
    before=before_log(logger, logging.INFO),
    after=after_log(logger, logging.WARN),
)
def wait_for_db(engine: Engine) -> None:
    """Wait for database to be ready by attempting a simple query."""
    with Session(engine) as session:
        session.exec(select(1))


def main() -> None:
    logger.info("Initializing service")
    wait_for_db(engine)
    if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
        init_db()
        logger.info("SQLite tables created")
    logger.info("Service finished initializing")


if __name__ == "__main__":
    main()
