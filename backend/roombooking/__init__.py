"""
RoomBooking Backend — Application Package
==========================================

What: Meeting-room reservation API (users, rooms, reservations).
Who:  Imported by uvicorn, Alembic and pytest as `roombooking`.

Layers:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP handlers)       │  ← status codes, headers, query params
    ├─────────────────────────────────────┤
    │      Services (business rules)      │  ← overlap check, ownership, uniqueness
    ├─────────────────────────────────────┤
    │  Models (SQLAlchemy) / Schemas      │  ← tables / API contracts
    ├─────────────────────────────────────┤
    │    Database (async sessions)        │  ← engine, session-per-request
    └─────────────────────────────────────┘

Routes never touch the ORM directly; services never see HTTP objects.
"""

__version__ = "1.0.0"
