"""
RoomBooking Backend — Room Service
===================================

What:  CRUD for meeting rooms with the unique-name rule.
Who:   Called by routes/rooms.py; ReservationService reuses fetch_room().
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roombooking.exceptions import ConflictError, NotFoundError, ValidationError
from roombooking.models import Reservation, Room
from roombooking.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from roombooking.services.db_errors import translate_db_errors

logger = logging.getLogger(__name__)


class RoomService:
    """
    Business logic for /rooms.

    Rules:
        - name unique across rooms (create and rename)
        - capacity >= 1 (schema-level; the table has a CHECK too)
        - rooms with reservations cannot be deleted
    """

    REQUIRED_FIELDS = frozenset({"name", "floor", "capacity"})

    async def fetch_room(self, db: AsyncSession, room_id: int) -> Room:
        """Load a Room row or raise NotFoundError."""
        with translate_db_errors("loading room", room_id=room_id):
            result = await db.execute(select(Room).where(Room.id == room_id))
            room = result.scalar_one_or_none()
        if room is None:
            raise NotFoundError(resource="room", resource_id=room_id)
        return room

    async def _name_taken(self, db: AsyncSession, name: str) -> bool:
        result = await db.execute(select(Room.id).where(Room.name == name))
        return result.scalar_one_or_none() is not None

    async def create_room(self, db: AsyncSession, data: RoomCreate) -> RoomResponse:
        """
        Create a room.

        Raises:
            ConflictError: a room with this name exists (→ 409)
        """
        with translate_db_errors("creating room", name=data.name):
            if await self._name_taken(db, data.name):
                logger.info("Rejected room create: name %r already exists", data.name)
                raise ConflictError(
                    message=f"A room named '{data.name}' already exists.",
                    context={"field": "name"},
                )

            room = Room(**data.model_dump())
            db.add(room)
            await db.flush()

        logger.info("Room %d created (%s, floor %d, capacity %d)",
                    room.id, room.name, room.floor, room.capacity)
        return RoomResponse.model_validate(room)

    async def list_rooms(
        self,
        db: AsyncSession,
        min_capacity: Optional[int] = None,
        floor: Optional[int] = None,
    ) -> List[RoomResponse]:
        """List rooms by id, optionally only those seating min_capacity or on one floor."""
        query = select(Room)
        if min_capacity is not None:
            query = query.where(Room.capacity >= min_capacity)
        if floor is not None:
            query = query.where(Room.floor == floor)
        query = query.order_by(Room.id)

        with translate_db_errors("listing rooms"):
            result = await db.execute(query)
            rooms = result.scalars().all()
        return [RoomResponse.model_validate(r) for r in rooms]

    async def get_room(self, db: AsyncSession, room_id: int) -> RoomResponse:
        room = await self.fetch_room(db, room_id)
        return RoomResponse.model_validate(room)

    async def update_room(
        self,
        db: AsyncSession,
        room_id: int,
        data: RoomUpdate,
    ) -> RoomResponse:
        """
        Apply a partial update. An explicit null clears `location`; it is
        rejected for the other fields.

        Raises:
            NotFoundError:   no such room (→ 404)
            ValidationError: null for name/floor/capacity (→ 400)
            ConflictError:   new name belongs to another room (→ 409)
        """
        room = await self.fetch_room(db, room_id)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)

        nulls = sorted(k for k in self.REQUIRED_FIELDS if k in changes and changes[k] is None)
        if nulls:
            raise ValidationError(
                message=f"Field '{nulls[0]}' cannot be null.",
                field=nulls[0],
            )

        with translate_db_errors("updating room", room_id=room_id):
            new_name = changes.get("name")
            if new_name is not None and new_name != room.name:
                if await self._name_taken(db, new_name):
                    raise ConflictError(
                        message=f"A room named '{new_name}' already exists.",
                        context={"field": "name"},
                    )

            for field, value in changes.items():
                setattr(room, field, value)
            await db.flush()

        logger.info("Room %d updated: %s", room.id, sorted(changes))
        return RoomResponse.model_validate(room)

    async def delete_room(self, db: AsyncSession, room_id: int) -> RoomResponse:
        """
        Delete a room and return its last state.

        Raises:
            NotFoundError: no such room (→ 404)
            ConflictError: reservations still reference the room (→ 409)
        """
        room = await self.fetch_room(db, room_id)
        snapshot = RoomResponse.model_validate(room)

        with translate_db_errors("deleting room", room_id=room_id):
            booked = await db.execute(
                select(func.count(Reservation.id)).where(Reservation.room_id == room_id)
            )
            booked_count = booked.scalar() or 0
            if booked_count:
                raise ConflictError(
                    message=(
                        f"Room {room_id} still has {booked_count} reservation(s); "
                        "delete them first."
                    ),
                    context={"room_id": room_id, "reservations": booked_count},
                )

            await db.delete(room)
            await db.flush()

        logger.info("Room %d deleted", room_id)
        return snapshot


room_service = RoomService()
