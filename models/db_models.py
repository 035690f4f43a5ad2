"""
SQLAlchemy ORM models.

Purpose:
- Define Membership, User, Trainer, GymClass, Payment, Review and Routine tables
- Use SQLAlchemy async-compatible models
- Support migrations via Alembic

Notes:
- Primary keys are UUID4 strings generated on the Python side
- Child rows (payments, reviews) are removed by ON DELETE CASCADE; relationships
  use passive_deletes so the async session never lazy-loads them on delete
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from core.db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class AuthMode(str, Enum):
    """How the user signed up: local form, google with missing profile data, full google."""
    FORM = "form"
    GOOGLE_INCOMPLETE = "googleIncomplete"
    GOOGLE = "google"


class PaymentStatus(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class Membership(Base):
    """
    A purchasable membership plan.

    Columns:
    - name: unique plan name (e.g., "Premium")
    - price: plan price
    - duration_days: how long one purchase lasts
    """
    __tablename__ = "memberships"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(100), unique=True, index=True, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration_days = Column(Integer, nullable=False, default=30)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class User(Base):
    """
    A gym member (or admin).

    Columns:
    - email: unique login identifier
    - password: bcrypt hash; null for google users who never set one
    - auth: AuthMode value, gates which update paths are allowed
    - banned/ban_reason: banned users cannot update their profile
    - phone/country/city/address: optional profile fields
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=True)
    auth = Column(String(20), nullable=False, default=AuthMode.FORM.value, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    banned = Column(Boolean, nullable=False, default=False)
    ban_reason = Column(String(500), nullable=True)
    phone = Column(String(30), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    address = Column(String(255), nullable=True)
    membership_id = Column(String(36), ForeignKey("memberships.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # One User -> many Payments; loaded explicitly (selectinload) where needed
    payments = relationship(
        "Payment",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Trainer(Base):
    __tablename__ = "trainers"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), unique=True, index=True, nullable=False)
    bio = Column(Text, nullable=True)
    specialty = Column(String(100), nullable=True)
    experience_years = Column(Integer, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)  # produced by the external media host
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class GymClass(Base):
    """
    A scheduled class, optionally led by a trainer.
    """
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    capacity = Column(Integer, nullable=False, default=20)
    schedule = Column(String(100), nullable=True)  # e.g. "Mon 18:00"
    trainer_id = Column(String(36), ForeignKey("trainers.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Many Classes -> one Trainer
    trainer = relationship("Trainer", lazy="joined")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    membership_id = Column(String(36), ForeignKey("memberships.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.APPROVED.value)
    payment_date = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="payments")
    membership = relationship("Membership", lazy="joined")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Routine(Base):
    __tablename__ = "routines"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    trainer_id = Column(String(36), ForeignKey("trainers.id", ondelete="SET NULL"), nullable=True)
    file_url = Column(String(500), nullable=True)  # produced by the external media host
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
