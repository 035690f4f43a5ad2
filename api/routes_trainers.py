# api/routes_trainers.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from core.db import get_db_session
from core.pagination import SortOrder
from core.response import ok
from models.schemas import TrainerCreate, TrainerUpdate
from services.trainer_service import TrainerService

router = APIRouter()

def get_trainer_service(session: AsyncSession = Depends(get_db_session)) -> TrainerService:
    return TrainerService(session)

@router.post("", status_code=201)
async def create_trainer(payload: TrainerCreate, service: TrainerService = Depends(get_trainer_service)):
    return ok(await service.create(payload))

@router.get("")
async def list_trainers(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    sort_by: str = Query("name"),
    order: str = Query(SortOrder.ASC.value, description="ASC or DESC, case-insensitive"),
    service: TrainerService = Depends(get_trainer_service),
):
    result = await service.find_all(page=page, limit=limit, sort_by=sort_by, order=order)
    return ok(result.model_dump())

@router.get("/{trainer_id}")
async def get_trainer(trainer_id: str, service: TrainerService = Depends(get_trainer_service)):
    return ok(await service.find_one(trainer_id))

@router.patch("/{trainer_id}")
async def update_trainer(trainer_id: str, patch: TrainerUpdate, service: TrainerService = Depends(get_trainer_service)):
    return ok(await service.update(trainer_id, patch))

@router.delete("/{trainer_id}")
async def delete_trainer(trainer_id: str, service: TrainerService = Depends(get_trainer_service)):
    removed = await service.remove(trainer_id)
    return ok({"message": "Trainer removed", "trainer": removed})
