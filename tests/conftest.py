import os
import sys
import uuid
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


# Ensure project root is on sys.path so `core.*`, `services.*` imports work
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Settings are read at import time: keep the app from building its own engine
# and make bcrypt cheap for tests.
os.environ["DATABASE_ASYNC_URL"] = "disabled"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_ON_STARTUP"] = "false"

from core.db import Base, get_db_session  # noqa: E402
from core.security import hash_password  # noqa: E402
from main import app  # noqa: E402
from models.db_models import AuthMode, User  # noqa: E402


@pytest_asyncio.fixture()
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite leaves FK enforcement off, so ON DELETE CASCADE would never fire
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture()
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture()
async def client(session_maker):
    """Async test client with get_db_session bound to the test database."""

    async def _override_session():
        async with session_maker() as s:
            yield s

    app.dependency_overrides[get_db_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def make_user(session):
    """Insert a user row; keyword arguments override the defaults."""

    async def _make(**overrides) -> User:
        values = {
            "name": "Test User",
            "email": f"user-{uuid.uuid4().hex[:8]}@mail.com",
            "password": hash_password("Secret123!"),
            "auth": AuthMode.FORM.value,
            "phone": "555-0000",
            "country": "Argentina",
            "city": "Rosario",
            "address": "Bv. Orono 150",
        }
        values.update(overrides)
        user = User(**values)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make
