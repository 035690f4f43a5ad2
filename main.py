"""
Main FastAPI application (entrypoint).

Responsibilities:
- Wire API routers (users/trainers/catalog/admin)
- Register centralized exception handlers
- Provide middleware: request-id logging, CORS
- Add health / readiness endpoints
- On startup: create tables (dev convenience) and optionally seed baseline data
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import uvicorn

from api import routes_users, routes_trainers, routes_catalog, routes_admin
from config.settings import settings
from core.exception_handlers import register_exception_handlers
from core.response import ok, error
from core.logging import configure_logging, request_logging_middleware
from core import db
from core.db import Base
from models import db_models  # noqa: F401 ensure models are imported so tables are registered
from services.seed_service import SeedService

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
    - Create DB tables when CREATE_TABLES_ON_STARTUP is set. In production use Alembic migrations instead.
    - Seed baseline data when SEED_ON_STARTUP is set (sequential, idempotent).
    """
    if db.engine is None:
        logger.warning("DB disabled; skipping table creation and seeding")
    else:
        if settings.CREATE_TABLES_ON_STARTUP:
            async with db.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("DB tables ensured")
        if settings.SEED_ON_STARTUP:
            async with db.async_session_maker() as session:
                await SeedService(session).seed_database()
    yield
    if db.engine is not None:
        await db.engine.dispose()


app = FastAPI(title=settings.API_TITLE, version=settings.API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes_users.router, prefix="/users", tags=["users"])
app.include_router(routes_trainers.router, prefix="/trainers", tags=["trainers"])
app.include_router(routes_catalog.router, prefix="", tags=["catalog"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

register_exception_handlers(app)

# Adds X-Request-ID header and logs every request
app.middleware("http")(request_logging_middleware)

@app.get("/health")
async def health():
    """Simple health endpoint used by load balancers and orchestrators."""
    return ok({"status": "ok"})

@app.get("/ready")
async def ready():
    """Readiness: check DB connectivity."""
    if db.engine is None:
        return JSONResponse(status_code=503, content=error(code="db_disabled", message="DB is not configured"))
    try:
        async with db.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return ok({"ready": True})
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(status_code=503, content=error(code="db_unreachable", message="DB unavailable"))

if __name__ == "__main__":
    # Run with: python main.py for local dev. For production use uvicorn/gunicorn with workers.
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
