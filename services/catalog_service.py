"""
Read-only catalog: membership plans and scheduled classes.
"""
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from core.pagination import PageResult, SortOrder, paginate
from models.db_models import GymClass, Membership


class CatalogService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_memberships(self, page: int = 1, limit: int = 5, sort_by: str = "price",
                               order: str | SortOrder = SortOrder.ASC) -> PageResult:
        return await paginate(self.session, Membership, page, limit, sort_by, order,
                              serializer=self._membership_to_dict)

    async def get_membership(self, membership_id: str) -> Dict[str, Any]:
        membership = await self.session.get(Membership, membership_id)
        if membership is None:
            raise NotFoundError("Membership not found")
        return self._membership_to_dict(membership)

    async def list_classes(self, page: int = 1, limit: int = 5, sort_by: str = "name",
                           order: str | SortOrder = SortOrder.ASC) -> PageResult:
        return await paginate(self.session, GymClass, page, limit, sort_by, order,
                              serializer=self._class_to_dict)

    async def get_class(self, class_id: str) -> Dict[str, Any]:
        gym_class = await self.session.get(GymClass, class_id)
        if gym_class is None:
            raise NotFoundError("Class not found")
        return self._class_to_dict(gym_class)

    @staticmethod
    def _membership_to_dict(membership: Membership) -> Dict[str, Any]:
        return {
            "id": membership.id,
            "name": membership.name,
            "price": str(membership.price),
            "duration_days": membership.duration_days,
            "description": membership.description,
        }

    @staticmethod
    def _class_to_dict(gym_class: GymClass) -> Dict[str, Any]:
        return {
            "id": gym_class.id,
            "name": gym_class.name,
            "description": gym_class.description,
            "location": gym_class.location,
            "capacity": gym_class.capacity,
            "schedule": gym_class.schedule,
            "trainer_id": gym_class.trainer_id,
            "trainer_name": gym_class.trainer.name if gym_class.trainer else None,
        }
