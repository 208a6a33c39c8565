"""
ORM models. Importing this package registers every table on Base.metadata,
which relationship() string targets and Alembic autogenerate both rely on.
"""

from roombooking.models.reservation import Reservation, reservation_attendees
from roombooking.models.room import Room
from roombooking.models.user import User

__all__ = ["Reservation", "Room", "User", "reservation_attendees"]
