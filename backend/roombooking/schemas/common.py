"""
RoomBooking Backend — Shared Pydantic Schemas
==============================================

What:  Base model configuration plus the error and health payloads shared by
       every router.

Naming:
    JSON uses camelCase (startTime, reserverId, createdAt), the contract
    existing API clients were written against. Python code uses snake_case;
    `to_camel` bridges the two and `populate_by_name` lets either spelling
    through on input.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from roombooking.middleware.request_id import request_id_var


class ApiModel(BaseModel):
    """Response-side base: camelCase aliases, readable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiRequest(BaseModel):
    """Request-side base: camelCase aliases, unknown fields rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class ErrorResponse(ApiModel):
    """
    What:  Standard error body for every non-2xx response.

    Example:
        {
            "error": "conflict",
            "message": "Room 3 is already reserved between ...",
            "details": {"room_id": 3, "conflicting_reservation_id": 12},
            "requestId": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


def error_body(
    error: str,
    message: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Serialized ErrorResponse (camelCase keys) for the current request.

    Shared by the exception handlers in main.py and by middleware that
    answers before routing (rate limit), so every error carries requestId.
    """
    body: Dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    body["requestId"] = request_id_var.get("") or None
    return body


class HealthResponse(ApiModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
