"""
Seed the database with baseline gym data.

Steps run strictly in dependency order and are awaited one after another:
memberships -> users -> trainers -> classes -> payments -> reviews -> routines

Every step is idempotent:
- rows whose natural key (name / email) already exists are skipped
- payments and reviews have no natural key, so they are only seeded into an
  empty table

Each step commits on its own. A failing step is rolled back and the error
propagates, so later steps never run on top of a half-seeded dependency.
"""
import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from core.security import hash_password_async
from models.db_models import (
    AuthMode,
    GymClass,
    Membership,
    Payment,
    PaymentStatus,
    Review,
    Routine,
    Trainer,
    User,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"

SEED_STEPS = (
    "memberships",
    "users",
    "trainers",
    "classes",
    "payments",
    "reviews",
    "routines",
)


class SeedService:
    def __init__(self, session: AsyncSession, data_dir: Optional[Path] = None):
        self.session = session
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR

    async def seed_database(self) -> Dict[str, int]:
        """Run every seed step in order. Returns {step: rows inserted}."""
        results: Dict[str, int] = {}
        for step in SEED_STEPS:
            results[step] = await self._run_step(step)
        logger.info("Seed finished: %s", results)
        return results

    async def _run_step(self, step: str) -> int:
        records = self._load(step)
        seeder = getattr(self, f"seed_{step}")
        try:
            inserted = await seeder(records)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.error("Seeding %s failed, aborting remaining steps", step)
            raise
        logger.info("Seeded %s: %d inserted, %d skipped", step, inserted, len(records) - inserted)
        return inserted

    def _load(self, step: str) -> List[Dict[str, Any]]:
        path = self.data_dir / f"{step}.json"
        if not path.exists():
            logger.warning("Seed file %s not found, skipping %s", path, step)
            return []
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON list")
        return data

    # --- steps ---

    async def seed_memberships(self, records: List[Dict[str, Any]]) -> int:
        existing = await self._existing(Membership.name)
        inserted = 0
        for entry in records:
            if entry["name"] in existing:
                continue
            self.session.add(Membership(
                name=entry["name"],
                price=Decimal(str(entry["price"])),
                duration_days=entry.get("duration_days", 30),
                description=entry.get("description"),
            ))
            existing.add(entry["name"])
            inserted += 1
        return inserted

    async def seed_users(self, records: List[Dict[str, Any]]) -> int:
        existing = await self._existing(User.email)
        memberships = await self._id_map(Membership.name, Membership.id)
        inserted = 0
        for entry in records:
            if entry["email"] in existing:
                continue
            password = entry.get("password")
            self.session.add(User(
                name=entry["name"],
                email=entry["email"],
                password=await hash_password_async(password) if password else None,
                auth=AuthMode(entry.get("auth", AuthMode.FORM.value)).value,
                is_admin=entry.get("is_admin", False),
                banned=entry.get("banned", False),
                ban_reason=entry.get("ban_reason"),
                phone=entry.get("phone"),
                country=entry.get("country"),
                city=entry.get("city"),
                address=entry.get("address"),
                membership_id=self._resolve(memberships, entry.get("membership"), "membership"),
            ))
            existing.add(entry["email"])
            inserted += 1
        return inserted

    async def seed_trainers(self, records: List[Dict[str, Any]]) -> int:
        existing = await self._existing(Trainer.name)
        inserted = 0
        for entry in records:
            if entry["name"] in existing:
                continue
            self.session.add(Trainer(
                name=entry["name"],
                bio=entry.get("bio"),
                specialty=entry.get("specialty"),
                experience_years=entry.get("experience_years", 0),
                image_url=entry.get("image_url"),
            ))
            existing.add(entry["name"])
            inserted += 1
        return inserted

    async def seed_classes(self, records: List[Dict[str, Any]]) -> int:
        existing = await self._existing(GymClass.name)
        trainers = await self._id_map(Trainer.name, Trainer.id)
        inserted = 0
        for entry in records:
            if entry["name"] in existing:
                continue
            self.session.add(GymClass(
                name=entry["name"],
                description=entry.get("description"),
                location=entry.get("location"),
                capacity=entry.get("capacity", 20),
                schedule=entry.get("schedule"),
                trainer_id=self._resolve(trainers, entry.get("trainer"), "trainer"),
            ))
            existing.add(entry["name"])
            inserted += 1
        return inserted

    async def seed_payments(self, records: List[Dict[str, Any]]) -> int:
        if await self._has_rows(Payment):
            return 0
        users = await self._id_map(User.email, User.id)
        memberships = await self._id_map(Membership.name, Membership.id)
        for entry in records:
            self.session.add(Payment(
                user_id=self._resolve(users, entry["email"], "user"),
                membership_id=self._resolve(memberships, entry.get("membership"), "membership"),
                amount=Decimal(str(entry["amount"])),
                status=PaymentStatus(entry.get("status", PaymentStatus.APPROVED.value)).value,
                payment_date=datetime.fromisoformat(entry["payment_date"]) if entry.get("payment_date") else datetime.utcnow(),
            ))
        return len(records)

    async def seed_reviews(self, records: List[Dict[str, Any]]) -> int:
        if await self._has_rows(Review):
            return 0
        users = await self._id_map(User.email, User.id)
        for entry in records:
            rating = int(entry["rating"])
            if not 1 <= rating <= 5:
                raise ValueError(f"review rating must be 1..5, got {rating}")
            self.session.add(Review(
                user_id=self._resolve(users, entry["email"], "user"),
                rating=rating,
                comment=entry.get("comment"),
            ))
        return len(records)

    async def seed_routines(self, records: List[Dict[str, Any]]) -> int:
        existing = await self._existing(Routine.name)
        trainers = await self._id_map(Trainer.name, Trainer.id)
        inserted = 0
        for entry in records:
            if entry["name"] in existing:
                continue
            self.session.add(Routine(
                name=entry["name"],
                description=entry.get("description"),
                trainer_id=self._resolve(trainers, entry.get("trainer"), "trainer"),
                file_url=entry.get("file_url"),
            ))
            existing.add(entry["name"])
            inserted += 1
        return inserted

    # --- helpers ---

    async def _existing(self, column) -> set:
        result = await self.session.execute(select(column))
        return set(result.scalars().all())

    async def _id_map(self, key_column, id_column) -> Dict[str, str]:
        result = await self.session.execute(select(key_column, id_column))
        return {key: id_ for key, id_ in result.all()}

    async def _has_rows(self, model) -> bool:
        result = await self.session.execute(select(func.count()).select_from(model))
        return result.scalar_one() > 0

    @staticmethod
    def _resolve(mapping: Dict[str, str], key: Optional[str], kind: str) -> Optional[str]:
        if key is None:
            return None
        if key not in mapping:
            raise ValueError(f"Seed data references unknown {kind} '{key}'")
        return mapping[key]
