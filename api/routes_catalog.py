# api/routes_catalog.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from core.db import get_db_session
from core.pagination import SortOrder
from core.response import ok
from services.catalog_service import CatalogService

router = APIRouter()

def get_catalog_service(session: AsyncSession = Depends(get_db_session)) -> CatalogService:
    return CatalogService(session)

@router.get("/memberships")
async def list_memberships(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    sort_by: str = Query("price"),
    order: str = Query(SortOrder.ASC.value, description="ASC or DESC, case-insensitive"),
    service: CatalogService = Depends(get_catalog_service),
):
    result = await service.list_memberships(page, limit, sort_by, order)
    return ok(result.model_dump())

@router.get("/memberships/{membership_id}")
async def get_membership(membership_id: str, service: CatalogService = Depends(get_catalog_service)):
    return ok(await service.get_membership(membership_id))

@router.get("/classes")
async def list_classes(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    sort_by: str = Query("name"),
    order: str = Query(SortOrder.ASC.value, description="ASC or DESC, case-insensitive"),
    service: CatalogService = Depends(get_catalog_service),
):
    result = await service.list_classes(page, limit, sort_by, order)
    return ok(result.model_dump())

@router.get("/classes/{class_id}")
async def get_class(class_id: str, service: CatalogService = Depends(get_catalog_service)):
    return ok(await service.get_class(class_id))
