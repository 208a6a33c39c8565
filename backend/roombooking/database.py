"""
RoomBooking Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, declarative base, and the
       FastAPI session dependency.
How:   One engine per process; one AsyncSession per request that commits
       when the handler returns and rolls back when it raises.
Who:   Route handlers (via Depends), Alembic env.py, the app lifespan.

Pooling:
    PostgreSQL URLs get a sized QueuePool (pool_size + max_overflow,
    pre-ping, hourly recycle). SQLite URLs use the dialect's default pool;
    aiosqlite rejects the sizing arguments.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from roombooking.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: response models are built from ORM objects after
# the commit in get_db_session, outside any lazy-load context.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model (and Alembic metadata)."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing a database session per request.

    Flow:
        1. Open a session from the factory
        2. Yield it to the route handler
        3. Commit on success / roll back on any exception
        4. Close (connection returns to the pool)

    Example:
        @router.get("/rooms")
        async def list_rooms(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables() -> None:
    """
    Create any missing tables from the ORM metadata.

    Used when DB_AUTO_CREATE is enabled; Alembic owns the schema otherwise.
    """
    # Registers every mapped class on Base.metadata
    import roombooking.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured (%d tables)", len(Base.metadata.tables))


async def dispose_engine() -> None:
    """Close all pooled connections; called from the shutdown half of lifespan."""
    await engine.dispose()
