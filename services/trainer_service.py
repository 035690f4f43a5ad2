"""
Trainer CRUD with async SQLAlchemy.

Key methods:
- create(data): INSERT, 409 on duplicate name
- find_all(...): paginated listing
- find_one(id) / update(id, patch) / remove(id): 404 on unknown id
"""
from typing import Any, Dict, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, InvalidArgumentError, NotFoundError
from core.pagination import PageResult, SortOrder, paginate
from models.db_models import Trainer
from models.schemas import TrainerCreate, TrainerUpdate
import logging

logger = logging.getLogger(__name__)


def _validated(schema: Type[BaseModel], data: BaseModel | Dict[str, Any]) -> BaseModel:
    if isinstance(data, schema):
        return data
    raw = data.model_dump(exclude_unset=True) if isinstance(data, BaseModel) else data
    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise InvalidArgumentError(f"{field}: {first.get('msg', 'invalid value')}") from None


def _is_unique_violation(ie: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed", MySQL: "Duplicate entry ... for key"
    text = str(ie.orig).lower()
    return "unique" in text or "duplicate" in text


class TrainerService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: BaseModel | Dict[str, Any]) -> Dict[str, Any]:
        trainer = Trainer(**_validated(TrainerCreate, data).model_dump())
        self.session.add(trainer)
        await self._commit(f"Trainer '{trainer.name}' already exists")
        await self.session.refresh(trainer)
        logger.info("Created trainer %s (%s)", trainer.id, trainer.name)
        return self._to_dict(trainer)

    async def find_all(
        self,
        page: int = 1,
        limit: int = 5,
        sort_by: str = "name",
        order: str | SortOrder = SortOrder.ASC,
    ) -> PageResult:
        return await paginate(
            self.session, Trainer, page=page, limit=limit, sort_by=sort_by, order=order,
            serializer=self._to_dict,
        )

    async def find_one(self, trainer_id: str) -> Dict[str, Any]:
        return self._to_dict(await self._get_or_404(trainer_id))

    async def update(self, trainer_id: str, patch: BaseModel | Dict[str, Any]) -> Dict[str, Any]:
        trainer = await self._get_or_404(trainer_id)
        changes = _validated(TrainerUpdate, patch).model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(trainer, key, value)
        await self._commit("Another trainer already uses that name")
        await self.session.refresh(trainer)
        return self._to_dict(trainer)

    async def remove(self, trainer_id: str) -> Dict[str, Any]:
        trainer = await self._get_or_404(trainer_id)
        snapshot = self._to_dict(trainer)
        await self.session.delete(trainer)
        await self._commit("Trainer could not be removed")
        logger.info("Removed trainer %s", trainer_id)
        return snapshot

    async def _get_or_404(self, trainer_id: str) -> Trainer:
        trainer = await self.session.get(Trainer, trainer_id)
        if trainer is None:
            raise NotFoundError("Trainer not found")
        return trainer

    async def _commit(self, conflict_message: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as ie:
            await self.session.rollback()
            logger.warning("IntegrityError on trainer write (%s)", ie)
            if _is_unique_violation(ie):
                raise ConflictError(conflict_message) from None
            raise InvalidArgumentError("Trainer data violates a database constraint") from None
        except Exception:
            await self.session.rollback()
            raise

    @staticmethod
    def _to_dict(trainer: Trainer) -> Dict[str, Any]:
        return {
            "id": trainer.id,
            "name": trainer.name,
            "bio": trainer.bio,
            "specialty": trainer.specialty,
            "experience_years": trainer.experience_years,
            "image_url": trainer.image_url,
            "created_at": trainer.created_at.isoformat() if trainer.created_at else None,
            "updated_at": trainer.updated_at.isoformat() if trainer.updated_at else None,
        }
