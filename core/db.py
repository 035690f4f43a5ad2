"""
Async database engine and session management.

Purpose:
- Create SQLAlchemy async engine (MySQL via aiomysql by default)
- Provide async session factory for dependency injection
- Provide Base declarative class for ORM models

Production notes:
- Use connection pooling with appropriate pool_size and max_overflow
- Schema changes go through Alembic; create_all is a dev convenience
"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine import make_url
from fastapi import HTTPException
from config.settings import settings
import logging
from typing import AsyncGenerator, Optional

logger = logging.getLogger(__name__)

Base = declarative_base()

# When DATABASE_ASYNC_URL is "disabled", do not create an engine at all.
engine = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None

if settings.db_enabled:
	engine = create_async_engine(
		settings.DATABASE_ASYNC_URL,
		echo=settings.DEBUG,
		pool_pre_ping=True,
	)
	async_session_maker = async_sessionmaker(
		engine, expire_on_commit=False, class_=AsyncSession
	)
	logger.info("Async DB engine created: %s", make_url(settings.DATABASE_ASYNC_URL).render_as_string(hide_password=True))
else:
	logger.warning("DATABASE_ASYNC_URL is 'disabled' – DB engine will not be created.")

async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
	"""
	Yield an AsyncSession for one request. Responds 503 when the DB is disabled.
	"""
	if async_session_maker is None:
		raise HTTPException(status_code=503, detail="Database is not configured")

	async with async_session_maker() as session:
		try:
			yield session
		finally:
			await session.close()
