from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.db import get_db_session
from core.response import ok
from services.seed_service import SeedService

router = APIRouter()


@router.post("/seed")
async def seed(session: AsyncSession = Depends(get_db_session)):
    """
    Admin: populate baseline data (memberships, users, trainers, classes,
    payments, reviews, routines). Safe to call repeatedly; existing rows are
    skipped.

    Response:
    { "ok": true, "data": { "memberships": 3, "users": 6, ... } }
    """
    inserted = await SeedService(session).seed_database()
    return ok(inserted)
