"""
RoomBooking Backend — User Service
===================================

What:  CRUD for users with the unique-email rule.
Who:   Called by routes/users.py; ReservationService reuses fetch_user().

Rules:
    - email is unique across users (checked on create and on email change)
    - a user who still owns reservations cannot be deleted (409); their
      attendee rows are removed when the delete goes through
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roombooking.exceptions import ConflictError, NotFoundError, ValidationError
from roombooking.models import Reservation, User, reservation_attendees
from roombooking.schemas.user import UserCreate, UserResponse, UserUpdate
from roombooking.services.db_errors import translate_db_errors

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for /users.

    Responsibilities:
        - create_user / update_user: enforce unique email
        - get_user / list_users: reads with not-found handling
        - delete_user: refuse while reservations reference the user
    """

    REQUIRED_FIELDS = frozenset({"name", "email"})

    async def fetch_user(self, db: AsyncSession, user_id: int) -> User:
        """Load a User row or raise NotFoundError."""
        with translate_db_errors("loading user", user_id=user_id):
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def _email_taken(self, db: AsyncSession, email: str) -> bool:
        result = await db.execute(select(User.id).where(User.email == email))
        return result.scalar_one_or_none() is not None

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """
        Create a user.

        Raises:
            ConflictError: email already registered (→ 409)
        """
        with translate_db_errors("creating user", email=data.email):
            if await self._email_taken(db, data.email):
                logger.info("Rejected user create: email %s already exists", data.email)
                raise ConflictError(
                    message=f"A user with email '{data.email}' already exists.",
                    context={"field": "email"},
                )

            user = User(name=data.name, email=data.email)
            db.add(user)
            await db.flush()

        logger.info("User %d created (%s)", user.id, user.email)
        return UserResponse.model_validate(user)

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        with translate_db_errors("listing users"):
            result = await db.execute(select(User).order_by(User.id))
            users = result.scalars().all()
        return [UserResponse.model_validate(u) for u in users]

    async def get_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        user = await self.fetch_user(db, user_id)
        return UserResponse.model_validate(user)

    async def update_user(
        self,
        db: AsyncSession,
        user_id: int,
        data: UserUpdate,
    ) -> UserResponse:
        """
        Apply a partial update; only fields present in the body change.

        Raises:
            NotFoundError:   no such user (→ 404)
            ValidationError: explicit null for name/email (→ 400)
            ConflictError:   new email belongs to another user (→ 409)
        """
        user = await self.fetch_user(db, user_id)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)

        nulls = sorted(k for k in self.REQUIRED_FIELDS if k in changes and changes[k] is None)
        if nulls:
            raise ValidationError(
                message=f"Field '{nulls[0]}' cannot be null.",
                field=nulls[0],
            )

        with translate_db_errors("updating user", user_id=user_id):
            new_email = changes.get("email")
            if new_email is not None and new_email != user.email:
                if await self._email_taken(db, new_email):
                    raise ConflictError(
                        message=f"A user with email '{new_email}' already exists.",
                        context={"field": "email"},
                    )

            for field, value in changes.items():
                setattr(user, field, value)
            await db.flush()

        logger.info("User %d updated: %s", user.id, sorted(changes))
        return UserResponse.model_validate(user)

    async def delete_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        """
        Delete a user and return its last state.

        Raises:
            NotFoundError: no such user (→ 404)
            ConflictError: user is still the reserver of reservations (→ 409)
        """
        user = await self.fetch_user(db, user_id)
        snapshot = UserResponse.model_validate(user)

        with translate_db_errors("deleting user", user_id=user_id):
            owned = await db.execute(
                select(func.count(Reservation.id)).where(Reservation.reserver_id == user_id)
            )
            owned_count = owned.scalar() or 0
            if owned_count:
                raise ConflictError(
                    message=(
                        f"User {user_id} still owns {owned_count} reservation(s); "
                        "delete or reassign them first."
                    ),
                    context={"user_id": user_id, "reservations": owned_count},
                )

            await db.execute(
                delete(reservation_attendees).where(reservation_attendees.c.user_id == user_id)
            )
            await db.delete(user)
            await db.flush()

        logger.info("User %d deleted", user_id)
        return snapshot


user_service = UserService()
