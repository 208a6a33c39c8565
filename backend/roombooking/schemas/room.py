"""
RoomBooking Backend — Room Schemas
===================================

What:  Request and response contracts for /rooms.
"""

from typing import Optional

from pydantic import Field

from roombooking.schemas.common import ApiModel, ApiRequest


class RoomCreate(ApiRequest):
    name: str = Field(min_length=1, max_length=100, description="Room name", examples=["Large Room 1"])
    floor: int = Field(description="Floor the room is on", examples=[5])
    capacity: int = Field(ge=1, description="Maximum number of people (at least 1)", examples=[20])
    location: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Detailed location (optional)",
        examples=["Building A, next to 301"],
    )


class RoomUpdate(ApiRequest):
    """Partial update: omitted fields keep their stored value."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    floor: Optional[int] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    location: Optional[str] = Field(default=None, max_length=255)


class RoomResponse(ApiModel):
    id: int = Field(description="Room ID")
    name: str
    floor: int
    capacity: int
    location: Optional[str] = None
