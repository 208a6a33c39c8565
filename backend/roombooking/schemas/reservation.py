"""
RoomBooking Backend — Reservation Schemas
==========================================

What:  Request and response contracts for /reservations.

Time handling:
    startTime / endTime are ISO 8601. A value without an offset is taken as
    UTC; a value with one is converted to UTC. Ordering rules (end after
    start, start not in the past) are business rules and live in
    ReservationService, so they answer 400 with a specific message.

Ownership:
    PATCH and DELETE carry requestingUserId in the body. It is compared with
    the stored reserver; there is no token or session.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from roombooking.schemas.common import ApiModel, ApiRequest
from roombooking.schemas.room import RoomResponse
from roombooking.schemas.user import UserResponse
from roombooking.timeutils import as_utc


class ReservationCreate(ApiRequest):
    start_time: datetime = Field(
        description="Reservation start (ISO 8601)",
        examples=["2030-07-10T10:00:00Z"],
    )
    end_time: datetime = Field(
        description="Reservation end (ISO 8601), exclusive",
        examples=["2030-07-10T11:00:00Z"],
    )
    reserver_id: int = Field(description="ID of the user making the reservation", examples=[1])
    room_id: int = Field(description="ID of the room to reserve", examples=[1])
    attendee_ids: List[int] = Field(
        default_factory=list,
        description="IDs of attending users (optional); ids with no matching user are ignored",
        examples=[[2, 3]],
    )

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ReservationUpdate(ApiRequest):
    """
    Partial update. requestingUserId is mandatory and must match the
    reserver; every other field is optional.
    """
    requesting_user_id: int = Field(description="ID of the user requesting the change", examples=[1])
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    reserver_id: Optional[int] = None
    room_id: Optional[int] = None
    attendee_ids: Optional[List[int]] = Field(
        default=None,
        description="Replaces the attendee list when given; unknown ids are ignored",
    )

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class ReservationDelete(ApiRequest):
    requesting_user_id: int = Field(description="ID of the user requesting deletion", examples=[1])


class ReservationResponse(ApiModel):
    id: int = Field(description="Reservation ID")
    start_time: datetime
    end_time: datetime
    created_at: datetime
    reserver: UserResponse
    room: RoomResponse
    attendees: List[UserResponse] = Field(default_factory=list)

    @field_validator("start_time", "end_time", "created_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
