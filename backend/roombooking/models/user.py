"""
RoomBooking Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
Who:   UserService (CRUD) and ReservationService (reserver / attendee lookups).

Table notes:
    - Integer autoincrement primary key; ids appear in request bodies
      (reserverId, attendeeIds, requestingUserId).
    - email carries a UNIQUE constraint. UserService checks first so the
      common case gets a clean 409; the constraint catches the race.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombooking.database import Base
from roombooking.timeutils import utcnow

if TYPE_CHECKING:
    from roombooking.models.reservation import Reservation


class User(Base):
    """
    A person who can reserve rooms or attend reservations.

    Relationships:
        reservations: Reservations this user owns (as reserver). Not loaded
            eagerly; UserService counts them with a query before deletion.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login / contact email, unique across users",
    )

    # Python-side default so the value is present right after flush;
    # server_default covers rows inserted outside the ORM.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the user was created (UTC)",
    )

    reservations: Mapped[List["Reservation"]] = relationship(
        back_populates="reserver",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
