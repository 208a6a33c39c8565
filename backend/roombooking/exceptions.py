"""
RoomBooking Backend — Custom Exception Hierarchy
=================================================

What:  Application exceptions, one per HTTP outcome the API can produce.
How:   Each carries a user-facing `message` and a `context` dict. Services
       raise them; handlers registered in main.py turn them into JSON bodies.
Who:   Raised by services and middleware; caught by the global handlers.

Hierarchy:
    RoomBookingError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class RoomBookingError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Extra structured detail about the failure
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RoomBookingError):
    """
    Raised when a request is well-formed but breaks a business rule.

    When:    Reservation ends before it starts, or starts in the past.
    HTTP:    400 Bad Request

    Schema-level failures (missing fields, wrong types) come from FastAPI's
    RequestValidationError and are mapped to the same 400 response shape.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ForbiddenError(RoomBookingError):
    """
    Raised when the requesting user may not act on a resource.

    When:    requestingUserId differs from the reservation's reserver on
             PATCH or DELETE /reservations/{id}.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(RoomBookingError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown user / room / reservation id, in the path or in a body
             reference (roomId, reserverId, attendeeIds).
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(RoomBookingError):
    """
    Raised when a write collides with existing state.

    When:
        - duplicate user email or room name
        - reservation overlaps another one in the same room
        - deleting a user or room that reservations still reference
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with the current state of the resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(RoomBookingError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The response body always carries a generic message; `context` is only
    written to the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(RoomBookingError):
    """
    Built by RateLimitMiddleware when a client exceeds the per-IP request
    rate limit; rendered by the middleware itself, not an app handler.

    HTTP:    429 Too Many Requests (with Retry-After)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
