import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from config.database_config import get_log_level
from database import Base, dispose_engine, get_engine
import models  # noqa: F401  registers the tables on Base.metadata
from utils.logging_utils import configure_logging

logger = logging.getLogger(__name__)


async def init_database(engine: AsyncEngine | None = None) -> None:
    """
    Create all tables that do not exist yet.

    Existing tables are left alone; schema migration is not handled here.

    Args:
        engine: Engine to use; defaults to the configured process-wide engine
    """
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database initialized ({len(Base.metadata.tables)} tables)")


async def drop_database(engine: AsyncEngine | None = None) -> None:
    """Drop every table known to the metadata."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")


async def main() -> None:
    """Set up logging from LOG_LEVEL and create the schema at DATABASE_URL."""
    configure_logging(get_log_level())
    try:
        await init_database()
    finally:
        await dispose_engine()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
