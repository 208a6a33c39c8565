"""
RoomBooking Backend — User Schemas
===================================

What:  Request and response contracts for /users.
How:   Addresses are checked by EmailStr (email-validator) and stored
       lowercased, so the unique-email rule is case-insensitive.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from roombooking.schemas.common import ApiModel, ApiRequest
from roombooking.timeutils import as_utc


class UserCreate(ApiRequest):
    name: str = Field(min_length=1, max_length=100, description="User name", examples=["Hong Gildong"])
    email: EmailStr = Field(
        description="User email, unique across users",
        examples=["gildong@example.com"],
    )

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(ApiRequest):
    """Partial update: omitted fields keep their stored value."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v is not None else v


class UserResponse(ApiModel):
    id: int = Field(description="User ID")
    name: str
    email: str
    created_at: datetime = Field(description="When the user was created (UTC)")

    @field_validator("created_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
