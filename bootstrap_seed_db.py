"""
Seed the configured database with the JSON files under data/.

Usage:
    python bootstrap_seed_db.py              # seed using data/
    python bootstrap_seed_db.py path/to/dir  # seed from another directory

Each step is idempotent, so the script can be re-run safely.
"""
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings
from core.db import Base
from core.logging import configure_logging
from models import db_models  # noqa: F401 ensure models are imported so tables are registered
from services.seed_service import SeedService

logger = logging.getLogger("bootstrap_seed_db")


async def main(data_dir: Path | None = None) -> dict:
    if not settings.db_enabled:
        raise RuntimeError(f"DATABASE_ASYNC_URL is not configured correctly: {settings.DATABASE_ASYNC_URL}")

    engine = create_async_engine(settings.DATABASE_ASYNC_URL, echo=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        async with session_maker() as session:
            return await SeedService(session, data_dir=data_dir).seed_database()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging()
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    inserted = asyncio.run(main(target))
    logger.info("Inserted rows per step: %s", inserted)
