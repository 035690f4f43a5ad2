# api/routes_users.py
from fastapi import APIRouter, Depends, Query
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from core.db import get_db_session
from core.pagination import SortOrder
from core.response import ok
from models.schemas import UserUpdate
from services.user_service import UserService, sanitize_user

router = APIRouter()

def get_user_service(session: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(session)

@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    sort_by: str = Query("name"),
    order: str = Query(SortOrder.ASC.value, description="ASC or DESC, case-insensitive"),
    service: UserService = Depends(get_user_service),
):
    """Paginated user listing (passwords stripped)."""
    result = await service.get_users(page=page, limit=limit, sort_by=sort_by, order=order)
    return ok(result.model_dump())

@router.get("/by-email")
async def get_user_by_email(email: EmailStr, service: UserService = Depends(get_user_service)):
    user = await service.get_user_by_email(str(email))
    return ok(sanitize_user(user))

@router.get("/{user_id}")
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return ok(await service.get_user_by_id(user_id))

@router.put("/{user_id}")
async def update_user(user_id: str, patch: UserUpdate, service: UserService = Depends(get_user_service)):
    user = await service.update_user(user_id, patch)
    return ok({"message": "User Updated Successfully", "user": sanitize_user(user)})

@router.delete("/{user_id}")
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    removed = await service.delete_user(user_id)
    return ok({"message": "User deleted successfully", "user": removed})
