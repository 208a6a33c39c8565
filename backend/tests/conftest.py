"""
RoomBooking Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the whole suite.

Environment:
    Variables are set BEFORE the application is imported, because
    roombooking.config builds its settings singleton at import time.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock standing in for AsyncSession (unit tests)
    ├── db_engine:        fresh SQLite file database with all tables
    ├── test_client:      HTTPX AsyncClient on a fresh app, get_db_session
    │                     overridden to use db_engine
    ├── at:               builds future ISO timestamps relative to one base
    ├── create_user / create_room / create_reservation: API helpers
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="roombooking_test_"), "app.db"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["DB_AUTO_CREATE"] = "false"

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import roombooking.models  # noqa: F401
from roombooking.database import Base, get_db_session
from roombooking.main import create_app


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        result = MagicMock()
        result.scalar_one_or_none.return_value = room
        mock_db_session.execute.return_value = result
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def base_time() -> datetime:
    """09:00 UTC, one week from now."""
    return (datetime.now(timezone.utc) + timedelta(days=7)).replace(
        hour=9, minute=0, second=0, microsecond=0
    )


@pytest.fixture
def at(base_time):
    """at(1.5) → ISO string for base_time + 1h30m."""
    def _at(hours: float) -> str:
        return (base_time + timedelta(hours=hours)).isoformat()
    return _at


# ══════════════════════════════════════════════════════════════════════════
# API fixtures (real SQLite database per test)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX client wired to a fresh app whose sessions hit db_engine.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def create_user(test_client):
    counter = {"n": 0}

    async def _create(name: str = None, email: str = None) -> dict:
        counter["n"] += 1
        n = counter["n"]
        response = await test_client.post(
            "/users",
            json={"name": name or f"User {n}", "email": email or f"user{n}@example.com"},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_room(test_client):
    counter = {"n": 0}

    async def _create(name: str = None, floor: int = 3, capacity: int = 8, **extra) -> dict:
        counter["n"] += 1
        body = {"name": name or f"Room {counter['n']}", "floor": floor, "capacity": capacity, **extra}
        response = await test_client.post("/rooms", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_reservation(test_client, at):
    async def _create(room_id: int, reserver_id: int, start: float, end: float, **extra):
        """Returns the raw response so callers can assert on error codes."""
        return await test_client.post(
            "/reservations",
            json={
                "startTime": at(start),
                "endTime": at(end),
                "roomId": room_id,
                "reserverId": reserver_id,
                **extra,
            },
        )

    return _create
