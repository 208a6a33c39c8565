"""
RoomBooking Backend — Reservation SQLAlchemy Model
===================================================

What:  ORM model for `reservations` plus the `reservation_attendees` junction.
Who:   ReservationService; Alembic migration 001.

Query pattern served by ix_reservations_room_time:

    SELECT ... FROM reservations
    WHERE room_id = :room AND start_time < :new_end AND end_time > :new_start
    [AND id != :self]
    LIMIT 1

Loading:
    reserver, room and attendees use lazy="selectin", so every SELECT of
    reservations loads them up front. Async sessions cannot lazy-load on
    attribute access, and every response embeds all three.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Table,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombooking.database import Base
from roombooking.timeutils import utcnow

if TYPE_CHECKING:
    from roombooking.models.room import Room
    from roombooking.models.user import User


reservation_attendees = Table(
    "reservation_attendees",
    Base.metadata,
    Column(
        "reservation_id",
        Integer,
        ForeignKey("reservations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Reservation(Base):
    """
    A booking of one room by one user over [start_time, end_time).

    Invariants:
        - end_time > start_time (CHECK constraint + service validation)
        - start_time >= now when created or updated (service validation)
        - no overlap with another reservation of the same room
          (service validation, one query per write)
    """

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Reservation start (UTC, inclusive)",
    )

    end_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Reservation end (UTC, exclusive)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the reservation was made (UTC)",
    )

    reserver_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Owner of the reservation",
    )

    room_id: Mapped[int] = mapped_column(
        ForeignKey("rooms.id"),
        nullable=False,
        comment="Reserved room",
    )

    reserver: Mapped["User"] = relationship(
        back_populates="reservations",
        lazy="selectin",
    )

    room: Mapped["Room"] = relationship(
        back_populates="reservations",
        lazy="selectin",
    )

    attendees: Mapped[List["User"]] = relationship(
        secondary=reservation_attendees,
        lazy="selectin",
        order_by="User.id",
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_reservations_time_order"),
        Index("ix_reservations_room_time", "room_id", "start_time", "end_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, room={self.room_id}, "
            f"{self.start_time}..{self.end_time})>"
        )
