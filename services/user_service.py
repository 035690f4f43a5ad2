"""
DB-backed user service using async SQLAlchemy.

Business rules around reading and mutating a user record:
- get_users         -> paginated, sanitized listing
- update_user       -> ban check + auth-mode gated merge, one locked transaction
- get_user_by_id    -> sanitized view (no password key)
- get_user_by_email -> full record with payments; store failures are masked
- delete_user       -> explicit existence guard, hard delete
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from core.errors import ConflictError, ForbiddenError, InternalError, InvalidArgumentError, NotFoundError
from core.pagination import PageResult, SortOrder, paginate
from core.security import hash_password_async
from models.db_models import AuthMode, Payment, User
from models.schemas import UserUpdate
import logging

logger = logging.getLogger(__name__)

# A googleIncomplete user may only be completed while one of these is still missing
COMPLETION_FIELDS = ("password", "phone", "country", "address")

SORTABLE_FIELDS = frozenset({
    "id", "name", "email", "auth", "is_admin", "banned", "phone", "country",
    "city", "address", "membership_id", "created_at", "updated_at",
})


def sanitize_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a user dict without the password field."""
    return {key: value for key, value in user.items() if key != "password"}


def _profile_changes(patch: BaseModel | Dict[str, Any]) -> Dict[str, Any]:
    """Validate a patch against UserUpdate and keep only the non-null values."""
    if not isinstance(patch, UserUpdate):
        raw = patch.model_dump(exclude_unset=True) if isinstance(patch, BaseModel) else patch
        try:
            patch = UserUpdate.model_validate(raw)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ()))
            raise InvalidArgumentError(f"{field}: {first.get('msg', 'invalid value')}") from None
    return patch.model_dump(exclude_unset=True, exclude_none=True)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_users(
        self,
        page: int = 1,
        limit: int = 5,
        sort_by: str = "name",
        order: str | SortOrder = SortOrder.ASC,
    ) -> PageResult:
        return await paginate(
            self.session,
            User,
            page=page,
            limit=limit,
            sort_by=sort_by,
            order=order,
            sortable=SORTABLE_FIELDS,
            serializer=lambda user: sanitize_user(self._to_dict(user)),
        )

    async def update_user(self, user_id: str, patch: BaseModel | Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a profile patch to a user.

        The row is read with SELECT ... FOR UPDATE so the ban check, the
        auth-mode decision and the write happen in one transaction. Any
        failure rolls back; nothing is written.

        Raises:
            NotFoundError: unknown user_id
            ForbiddenError: the user is banned
            InternalError: googleIncomplete user whose profile is already complete
            ConflictError: the new email belongs to another account
            InvalidArgumentError: the patch names a non-profile field or fails validation
        """
        changes = _profile_changes(patch)

        try:
            result = await self.session.execute(
                select(User).where(User.id == user_id).with_for_update()
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise NotFoundError("User not found or does not exist")

            if user.banned:
                logger.info("Rejected update for banned user %s", user_id)
                raise ForbiddenError(
                    f"Your account has been banned. Reason: {user.ban_reason or 'No reason provided.'}"
                )

            if user.auth == AuthMode.GOOGLE_INCOMPLETE:
                if not any(getattr(user, field) is None for field in COMPLETION_FIELDS):
                    raise InternalError("Unhandled auth type")
                changes["auth"] = AuthMode.GOOGLE.value
                logger.info("Promoting user %s from googleIncomplete to google", user_id)
            elif user.auth not in (AuthMode.FORM, AuthMode.GOOGLE):
                raise InternalError("Unhandled auth type")

            if "password" in changes:
                changes["password"] = await hash_password_async(changes["password"])

            for key, value in changes.items():
                setattr(user, key, value)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Email is already registered to another account") from None
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(user)
        return self._to_dict(user)

    async def get_user_by_id(self, user_id: str) -> Dict[str, Any]:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found or does not exist")
        return sanitize_user(self._to_dict(user))

    async def get_user_by_email(self, email: str) -> Dict[str, Any]:
        """
        Full user record (password hash included) with its payments.

        Store failures are logged and surfaced as a generic InternalError so
        callers cannot tell them apart from other server errors.
        """
        try:
            result = await self.session.execute(
                select(User)
                .options(selectinload(User.payments))
                .where(User.email == email)
            )
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("DB get_user_by_email error: %s", e)
            raise InternalError("Error while looking up the user") from e

        if user is None:
            raise NotFoundError("User not found")
        return self._to_dict(user, include_payments=True)

    async def delete_user(self, user_id: str) -> Dict[str, Any]:
        """Hard delete. Returns the sanitized record as it was before deletion."""
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found or does not exist")

        snapshot = sanitize_user(self._to_dict(user))
        try:
            await self.session.delete(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Deleted user %s", user_id)
        return snapshot

    @staticmethod
    def _to_dict(user: User, include_payments: bool = False) -> Dict[str, Any]:
        data = {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "password": user.password,
            "auth": user.auth,
            "is_admin": user.is_admin,
            "banned": user.banned,
            "ban_reason": user.ban_reason,
            "phone": user.phone,
            "country": user.country,
            "city": user.city,
            "address": user.address,
            "membership_id": user.membership_id,
            "created_at": user.created_at.isoformat() if user.created_at else None,
            "updated_at": user.updated_at.isoformat() if user.updated_at else None,
        }
        if include_payments:
            data["payments"] = [_payment_to_dict(p) for p in user.payments]
        return data


def _payment_to_dict(payment: Payment) -> Dict[str, Any]:
    membership: Optional[Any] = payment.membership
    return {
        "id": payment.id,
        "membership_id": payment.membership_id,
        "membership_name": membership.name if membership else None,
        "amount": str(payment.amount),
        "status": payment.status,
        "payment_date": payment.payment_date.isoformat() if payment.payment_date else None,
    }
