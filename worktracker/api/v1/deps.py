"""
FastAPI dependencies — database session, clock and caller identity.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.clock import Clock, SystemClock
from worktracker.core.config import settings
from worktracker.core.exceptions import storage_guard
from worktracker.db.session import async_session_factory
from worktracker.models.user import User
from worktracker.services.holidays import HolidayService
from worktracker.services.location import LocationService
from worktracker.services.work_hours import WorkHoursService


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Clock ───────────────────────────────────────────────────────────
def get_clock() -> Clock:
    return SystemClock(settings.TIMEZONE)


# ── Identity ────────────────────────────────────────────────────────
async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller from the user-id header set by the upstream identity layer."""
    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Missing or unknown user",
    )

    raw_id = request.headers.get(settings.USER_ID_HEADER, "").strip()
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise credentials_exc

    with storage_guard("user lookup"):
        user = await db.get(User, int(raw_id))
    if user is None:
        raise credentials_exc
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account",
        )
    return user


# ── Services ────────────────────────────────────────────────────────
def get_work_hours_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> WorkHoursService:
    return WorkHoursService(db, clock)


def get_location_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> LocationService:
    return LocationService(db, clock)


def get_holiday_service(db: AsyncSession = Depends(get_db)) -> HolidayService:
    return HolidayService(db)
