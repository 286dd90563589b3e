"""
Shared test fixtures for the Work Time Tracker test suite.

Every test gets its own in-memory aiosqlite database, a clock frozen on
Wednesday 2024-03-13 and an active user to act as.
"""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import date

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import StaticPool

from worktracker.api.v1.deps import get_clock, get_db
from worktracker.core.clock import FixedClock
from worktracker.core.config import settings
from worktracker.db.base import Base
from worktracker.main import app
from worktracker.models import (LocationEntry, PersonalHoliday, PublicHoliday,
                                User, WorkEntry)

TODAY = date(2024, 3, 13)  # Wednesday


# ── Database ────────────────────────────────────────────────────────
@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for seeding and direct service calls."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


# ── Seed data ───────────────────────────────────────────────────────
class Seeder:
    """Insert rows directly, bypassing the business rules under test."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.commit()
        return obj

    async def user(self, email: str, full_name: str | None = None, is_active: bool = True) -> User:
        return await self._save(User(email=email, full_name=full_name, is_active=is_active))

    async def public_holiday(self, day: date, name: str = "Public Holiday") -> PublicHoliday:
        return await self._save(PublicHoliday(holiday_date=day, name=name))

    async def personal_holiday(self, user_id: int, day: date) -> PersonalHoliday:
        return await self._save(PersonalHoliday(user_id=user_id, holiday_date=day))

    async def entry(self, user_id: int, day: date, hours: float = 8.0) -> WorkEntry:
        return await self._save(WorkEntry(user_id=user_id, work_date=day, hours=hours))

    async def location(self, user_id: int, day: date, is_onsite: bool | None) -> LocationEntry:
        return await self._save(LocationEntry(user_id=user_id, work_date=day, is_onsite=is_onsite))


@pytest.fixture
def seed(db_session: AsyncSession) -> Seeder:
    return Seeder(db_session)


@pytest.fixture
async def user(seed: Seeder) -> User:
    return await seed.user("alice@example.com", "Alice Example")


# ── HTTP client ─────────────────────────────────────────────────────
@pytest.fixture
async def async_client(session_factory, clock, user) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app, acting as ``user``."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={settings.USER_ID_HEADER: str(user.id)},
    ) as client:
        yield client

    app.dependency_overrides.clear()
