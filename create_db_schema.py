import asyncio
import logging

from sqlalchemy.ext.asyncio import create_async_engine

from config.settings import settings
from core.db import Base  # Base is already defined here
from core.logging import configure_logging
from models import db_models  # noqa: F401 ensure models are imported so tables are registered

logger = logging.getLogger("create_db_schema")


async def main():
    """
    One-time script to create all tables in the configured database.
    Uses a temporary async engine built from settings.DATABASE_ASYNC_URL.
    """
    db_url = settings.DATABASE_ASYNC_URL
    if not settings.db_enabled:
        raise RuntimeError(f"DATABASE_ASYNC_URL is not configured correctly: {db_url}")

    engine = create_async_engine(db_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Database schema created/updated successfully.")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
