"""
UTC helpers shared by models, schemas and services.

SQLite hands back naive datetimes even for DateTime(timezone=True) columns,
while PostgreSQL returns aware ones. Everything is normalised to aware UTC
before comparison.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive → assumed UTC; aware → converted to UTC; None passes through."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
