"""
Reporting endpoints: monthly stats, month calendar, missing days and team
overview, plus the health and status probes.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.api.v1.deps import (get_clock, get_current_user, get_db,
                                     get_work_hours_service)
from worktracker.core.clock import Clock
from worktracker.core.config import settings
from worktracker.core.exceptions import storage_guard
from worktracker.models.user import User
from worktracker.schemas.system import HealthResponse, StatusResponse
from worktracker.schemas.work import (CalendarDayRead, MissingDayRead,
                                      MissingDaysResponse,
                                      MonthCalendarResponse,
                                      MonthlyStatsResponse, TeamMemberRead,
                                      TeamOverviewResponse)
from worktracker.services.work_hours import WorkHoursService

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)

Year = Annotated[int, Path(ge=1, le=9999)]
Month = Annotated[int, Path(ge=1, le=12)]


# ── Monthly stats ───────────────────────────────────────────────────
@router.get("/reports/monthly/{year}/{month}", response_model=MonthlyStatsResponse)
async def monthly_stats(
    year: Year,
    month: Month,
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> MonthlyStatsResponse:
    """Required, logged, holiday and remaining hours for the caller's month."""
    stats = await service.get_monthly_stats(user.id, year, month)
    return MonthlyStatsResponse.model_validate(stats)


# ── Month calendar ──────────────────────────────────────────────────
@router.get("/reports/calendar/{year}/{month}", response_model=MonthCalendarResponse)
async def month_calendar(
    year: Year,
    month: Month,
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> MonthCalendarResponse:
    days = await service.get_month_calendar(user.id, year, month)
    return MonthCalendarResponse(
        year=year,
        month=month,
        days=[CalendarDayRead.model_validate(d) for d in days],
    )


# ── Missing days ────────────────────────────────────────────────────
@router.get("/reports/missing-days", response_model=MissingDaysResponse)
async def missing_days(
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> MissingDaysResponse:
    """Past working days, outside the editable window, with no hours logged."""
    days = await service.get_missing_days(user.id)
    return MissingDaysResponse(
        count=len(days),
        days=[MissingDayRead.model_validate(d) for d in days],
    )


# ── Team overview ───────────────────────────────────────────────────
@router.get("/reports/team/{year}/{month}", response_model=TeamOverviewResponse)
async def team_overview(
    year: Year,
    month: Month,
    _user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> TeamOverviewResponse:
    overview = await service.get_team_overview(year, month)
    return TeamOverviewResponse(
        year=overview.year,
        month=overview.month,
        required_hours=overview.required_hours,
        public_holidays=overview.public_holidays,
        members=[
            TeamMemberRead(
                user_id=m.user.id,
                email=m.user.email,
                full_name=m.user.full_name,
                total_hours=m.total_hours,
                hours_by_date=m.hours_by_date,
                holidays=m.holidays,
            )
            for m in overview.members
        ],
    )


# ── Health / Status ────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check — database connectivity."""
    result = HealthResponse(db=False)
    try:
        await db.execute(select(1))
        result.db = True
    except SQLAlchemyError as e:
        logger.error("Health check DB failure: %s", e)
    return result


@router.get("/status", response_model=StatusResponse)
async def system_status(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> StatusResponse:
    """Return current system status — active users and entries logged today."""
    with storage_guard("status counts"):
        user_count = await db.execute(
            select(func.count(User.id)).where(User.is_active.is_(True))
        )
    entries_today = await service.count_entries_on(clock.today())

    return StatusResponse(
        version=settings.VERSION,
        active_users=user_count.scalar() or 0,
        entries_today=entries_today,
        status="operational",
    )
