"""
RoomBooking Backend — Reservation Service
==========================================

What:  Reservation CRUD plus the three business rules of the system:
       time ordering, overlap rejection and ownership checks.
Who:   Called by routes/reservations.py.

Create flow (POST /reservations):
    ┌────────────┐   ┌────────────┐   ┌──────────────┐   ┌───────────┐   ┌────────┐
    │ Time rules │──▶│ Room and   │──▶│ Overlap      │──▶│ Attendees │──▶│ Insert │
    │ (400)      │   │ reserver   │   │ query (409)  │   │ (unknown  │   │        │
    └────────────┘   │ (404)      │   └──────────────┘   │  dropped) │   └────────┘
                     └────────────┘                      └───────────┘

Update flow (PATCH /reservations/{id}):
    load (404) → owner check (403) → merged time rules (400)
    → new room or reserver (404) → overlap excluding self (409) → apply

Overlap rule:
    Intervals are half-open, [start, end). Two reservations of one room
    overlap when  existing.start < new.end AND existing.end > new.start.
    A meeting ending at 11:00 and one starting at 11:00 do not overlap.

Concurrency:
    The overlap query and the INSERT/UPDATE run in the request's transaction
    but nothing locks the room between them. Two simultaneous overlapping
    requests can both pass the check.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roombooking.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from roombooking.models import Reservation, User
from roombooking.schemas.reservation import (
    ReservationCreate,
    ReservationDelete,
    ReservationResponse,
    ReservationUpdate,
)
from roombooking.services.db_errors import translate_db_errors
from roombooking.services.room_service import room_service
from roombooking.services.user_service import user_service
from roombooking.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)


def validate_time_range(start: datetime, end: datetime, now: Optional[datetime] = None) -> None:
    """
    Enforce the reservation time rules.

    Raises:
        ValidationError: start before `now`, or end not after start (→ 400)
    """
    now = now or utcnow()
    if start < now:
        raise ValidationError(
            message="Reservation start time must not be in the past.",
            field="startTime",
            context={"start_time": start.isoformat(), "now": now.isoformat()},
        )
    if end <= start:
        raise ValidationError(
            message="Reservation end time must be after its start time.",
            field="endTime",
            context={"start_time": start.isoformat(), "end_time": end.isoformat()},
        )


class ReservationService:
    """
    Business logic for /reservations.

    Responsibilities:
        - create_reservation(): time rules, references, overlap, insert
        - update_reservation(): ownership, merged time rules, overlap excluding self
        - delete_reservation(): ownership, delete (attendee rows go with it)
        - find_overlap(): the single range-intersection query
    """

    UPDATABLE_FIELDS = frozenset(
        {"start_time", "end_time", "reserver_id", "room_id", "attendee_ids"}
    )

    # ── Lookups ───────────────────────────────────────────────────────────

    async def fetch_reservation(self, db: AsyncSession, reservation_id: int) -> Reservation:
        """Load a reservation (with reserver, room, attendees) or raise NotFoundError."""
        with translate_db_errors("loading reservation", reservation_id=reservation_id):
            result = await db.execute(
                select(Reservation).where(Reservation.id == reservation_id)
            )
            reservation = result.scalar_one_or_none()
        if reservation is None:
            raise NotFoundError(resource="reservation", resource_id=reservation_id)
        return reservation

    async def fetch_attendees(self, db: AsyncSession, attendee_ids: Iterable[int]) -> List[User]:
        """
        Resolve attendee ids to users, ordered by id.

        Duplicate ids collapse to one attendee. Ids with no matching user
        are dropped; the reservation keeps the attendees that exist.
        """
        wanted = sorted(set(attendee_ids))
        if not wanted:
            return []

        with translate_db_errors("loading attendees"):
            result = await db.execute(select(User).where(User.id.in_(wanted)).order_by(User.id))
            users = list(result.scalars().all())

        unknown = sorted(set(wanted) - {u.id for u in users})
        if unknown:
            logger.info("Ignoring unknown attendee id(s): %s", unknown)
        return users

    async def find_overlap(
        self,
        db: AsyncSession,
        room_id: int,
        start: datetime,
        end: datetime,
        exclude_id: Optional[int] = None,
    ):
        """
        Return the first reservation of `room_id` intersecting [start, end),
        or None.

        SQL:
            SELECT id, start_time, end_time FROM reservations
            WHERE room_id = :room AND start_time < :end AND end_time > :start
              [AND id != :exclude_id]
            LIMIT 1
        """
        query = select(Reservation.id, Reservation.start_time, Reservation.end_time).where(
            Reservation.room_id == room_id,
            Reservation.start_time < end,
            Reservation.end_time > start,
        )
        if exclude_id is not None:
            query = query.where(Reservation.id != exclude_id)

        with translate_db_errors("checking reservation overlap", room_id=room_id):
            result = await db.execute(query.limit(1))
            return result.first()

    async def _ensure_no_overlap(
        self,
        db: AsyncSession,
        room_id: int,
        start: datetime,
        end: datetime,
        exclude_id: Optional[int] = None,
    ) -> None:
        clash = await self.find_overlap(db, room_id, start, end, exclude_id=exclude_id)
        if clash is not None:
            logger.info(
                "Overlap rejected: room %d [%s, %s) collides with reservation %d",
                room_id, start.isoformat(), end.isoformat(), clash.id,
            )
            raise ConflictError(
                message=(
                    f"Room {room_id} is already reserved between "
                    f"{as_utc(clash.start_time).isoformat()} and {as_utc(clash.end_time).isoformat()}."
                ),
                context={"room_id": room_id, "conflicting_reservation_id": clash.id},
            )

    @staticmethod
    def _ensure_owner(reservation: Reservation, requesting_user_id: int, action: str) -> None:
        if reservation.reserver_id != requesting_user_id:
            logger.warning(
                "User %d tried to %s reservation %d owned by user %d",
                requesting_user_id, action, reservation.id, reservation.reserver_id,
            )
            raise ForbiddenError(
                message=f"Only the reserver may {action} reservation {reservation.id}.",
                context={
                    "reservation_id": reservation.id,
                    "requesting_user_id": requesting_user_id,
                },
            )

    # ── Operations ────────────────────────────────────────────────────────

    async def create_reservation(
        self,
        db: AsyncSession,
        data: ReservationCreate,
    ) -> ReservationResponse:
        """
        Book a room.

        Raises:
            ValidationError: start in the past / end not after start (→ 400)
            NotFoundError:   room or reserver missing (→ 404)
            ConflictError:   room already booked in that window (→ 409)
        """
        start, end = as_utc(data.start_time), as_utc(data.end_time)
        validate_time_range(start, end)

        room = await room_service.fetch_room(db, data.room_id)
        reserver = await user_service.fetch_user(db, data.reserver_id)
        await self._ensure_no_overlap(db, room.id, start, end)
        attendees = await self.fetch_attendees(db, data.attendee_ids)

        reservation = Reservation(
            start_time=start,
            end_time=end,
            room=room,
            reserver=reserver,
            attendees=attendees,
        )
        with translate_db_errors("creating reservation", room_id=room.id):
            db.add(reservation)
            await db.flush()

        logger.info(
            "Reservation %d created: room %d, user %d, [%s, %s), %d attendee(s)",
            reservation.id, room.id, reserver.id,
            start.isoformat(), end.isoformat(), len(attendees),
        )
        return ReservationResponse.model_validate(reservation)

    async def list_reservations(
        self,
        db: AsyncSession,
        room_id: Optional[int] = None,
        reserver_id: Optional[int] = None,
    ) -> List[ReservationResponse]:
        """List reservations by start time, optionally for one room or one reserver."""
        query = select(Reservation)
        if room_id is not None:
            query = query.where(Reservation.room_id == room_id)
        if reserver_id is not None:
            query = query.where(Reservation.reserver_id == reserver_id)
        query = query.order_by(Reservation.start_time, Reservation.id)

        with translate_db_errors("listing reservations"):
            result = await db.execute(query)
            reservations = result.scalars().all()
        return [ReservationResponse.model_validate(r) for r in reservations]

    async def get_reservation(self, db: AsyncSession, reservation_id: int) -> ReservationResponse:
        reservation = await self.fetch_reservation(db, reservation_id)
        return ReservationResponse.model_validate(reservation)

    async def update_reservation(
        self,
        db: AsyncSession,
        reservation_id: int,
        data: ReservationUpdate,
    ) -> ReservationResponse:
        """
        Partially update a reservation on behalf of its reserver.

        The time rules apply to the merged result (new value where given,
        stored value otherwise), so touching only the attendees of a
        reservation that has already started is rejected as well.

        Raises:
            NotFoundError:   reservation, new room or new reserver missing (→ 404)
            ForbiddenError:  requester is not the reserver (→ 403)
            ValidationError: null field or time rules broken (→ 400)
            ConflictError:   overlaps another reservation of the room (→ 409)
        """
        reservation = await self.fetch_reservation(db, reservation_id)
        self._ensure_owner(reservation, data.requesting_user_id, action="update")

        changes: Dict[str, Any] = data.model_dump(
            exclude_unset=True, exclude={"requesting_user_id"}
        )
        nulls = sorted(k for k in self.UPDATABLE_FIELDS if k in changes and changes[k] is None)
        if nulls:
            raise ValidationError(message=f"Field '{nulls[0]}' cannot be null.", field=nulls[0])

        new_start = as_utc(changes.get("start_time", reservation.start_time))
        new_end = as_utc(changes.get("end_time", reservation.end_time))
        validate_time_range(new_start, new_end)

        room = reservation.room
        if "room_id" in changes and changes["room_id"] != reservation.room_id:
            room = await room_service.fetch_room(db, changes["room_id"])

        reserver = reservation.reserver
        if "reserver_id" in changes and changes["reserver_id"] != reservation.reserver_id:
            reserver = await user_service.fetch_user(db, changes["reserver_id"])

        attendees = None
        if "attendee_ids" in changes:
            attendees = await self.fetch_attendees(db, changes["attendee_ids"])

        if changes.keys() & {"start_time", "end_time", "room_id"}:
            await self._ensure_no_overlap(
                db, room.id, new_start, new_end, exclude_id=reservation.id
            )

        with translate_db_errors("updating reservation", reservation_id=reservation_id):
            reservation.start_time = new_start
            reservation.end_time = new_end
            reservation.room = room
            reservation.reserver = reserver
            if attendees is not None:
                reservation.attendees = attendees
            await db.flush()

        logger.info("Reservation %d updated: %s", reservation.id, sorted(changes))
        return ReservationResponse.model_validate(reservation)

    async def delete_reservation(
        self,
        db: AsyncSession,
        reservation_id: int,
        data: ReservationDelete,
    ) -> ReservationResponse:
        """
        Delete a reservation on behalf of its reserver and return its last state.

        Raises:
            NotFoundError:  no such reservation (→ 404)
            ForbiddenError: requester is not the reserver (→ 403)
        """
        reservation = await self.fetch_reservation(db, reservation_id)
        self._ensure_owner(reservation, data.requesting_user_id, action="delete")
        snapshot = ReservationResponse.model_validate(reservation)

        with translate_db_errors("deleting reservation", reservation_id=reservation_id):
            await db.delete(reservation)
            await db.flush()

        logger.info("Reservation %d deleted by user %d", reservation_id, data.requesting_user_id)
        return snapshot


reservation_service = ReservationService()
