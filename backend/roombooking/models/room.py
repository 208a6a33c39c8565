"""
RoomBooking Backend — Room SQLAlchemy Model
============================================

What:  ORM model for the `rooms` table.
Who:   RoomService (CRUD) and ReservationService (room lookups).

Constraints:
    - name is UNIQUE
    - capacity >= 1 (CHECK constraint, mirrored by the RoomCreate schema)
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombooking.database import Base

if TYPE_CHECKING:
    from roombooking.models.reservation import Reservation


class Room(Base):
    """A bookable meeting room."""

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Room name, unique across rooms",
    )

    floor: Mapped[int] = mapped_column(Integer, nullable=False, comment="Floor number")

    capacity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Maximum number of people",
    )

    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Free-form location hint, e.g. 'Building A, next to 301'",
    )

    reservations: Mapped[List["Reservation"]] = relationship(
        back_populates="room",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_rooms_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name='{self.name}', capacity={self.capacity})>"
