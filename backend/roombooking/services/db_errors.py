"""
RoomBooking Backend — Database Error Translation
=================================================

What:  Context manager mapping SQLAlchemy failures onto application errors.
How:   IntegrityError → ConflictError (a unique or FK constraint fired after
       the service's own pre-check, i.e. a concurrent write won the race).
       Any other SQLAlchemyError → DatabaseError (500, details logged only).
Who:   Wrapped around the query/flush section of every service method.

Example:
    with translate_db_errors("creating room", name=data.name):
        db.add(room)
        await db.flush()
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from roombooking.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(action: str, **context: Any) -> Iterator[None]:
    try:
        yield
    except IntegrityError as e:
        logger.warning("Integrity error while %s: %s", action, e.orig)
        raise ConflictError(
            message=f"Conflict while {action}: the data collides with an existing record.",
            context=context,
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error while %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            message=f"A database error occurred while {action}. Please try again.",
            context={**context, "error_type": type(e).__name__},
        ) from e
