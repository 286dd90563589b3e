"""
Holiday endpoints — personal days off and the public holiday calendar.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from worktracker.api.v1.deps import get_current_user, get_holiday_service
from worktracker.models.user import User
from worktracker.schemas.holiday import (HolidayRequest,
                                         HolidayRequestResponse,
                                         PersonalHolidayRead,
                                         PublicHolidayCreate,
                                         PublicHolidayRead)
from worktracker.schemas.work import DeleteResponse
from worktracker.services.holidays import HolidayService

router = APIRouter(tags=["holidays"])


# ── Personal holidays ───────────────────────────────────────────────
@router.get("/holidays", response_model=list[PersonalHolidayRead])
async def list_holidays(
    start: date | None = Query(None),
    end: date | None = Query(None),
    user: User = Depends(get_current_user),
    service: HolidayService = Depends(get_holiday_service),
) -> list[PersonalHolidayRead]:
    holidays = await service.list_personal_holidays(user.id, start, end)
    return [PersonalHolidayRead.model_validate(h) for h in holidays]


@router.post("/holidays", response_model=HolidayRequestResponse, status_code=status.HTTP_201_CREATED)
async def request_holidays(
    body: HolidayRequest,
    user: User = Depends(get_current_user),
    service: HolidayService = Depends(get_holiday_service),
) -> HolidayRequestResponse:
    """Book a single day or a range; weekends and public holidays inside the range are skipped."""
    booked, skipped = await service.request_personal_holidays(user.id, body.start_date, body.end_date)
    return HolidayRequestResponse(
        success=True,
        booked=[PersonalHolidayRead.model_validate(h) for h in booked],
        skipped=skipped,
    )


@router.delete("/holidays/{holiday_id}", response_model=DeleteResponse)
async def cancel_holiday(
    holiday_id: int,
    user: User = Depends(get_current_user),
    service: HolidayService = Depends(get_holiday_service),
) -> DeleteResponse:
    await service.cancel_personal_holiday(user.id, holiday_id)
    return DeleteResponse(success=True, message=f"Holiday {holiday_id} cancelled")


# ── Public holidays ─────────────────────────────────────────────────
@router.get("/public-holidays", response_model=list[PublicHolidayRead])
async def list_public_holidays(
    year: int | None = Query(None, ge=1, le=9999),
    _user: User = Depends(get_current_user),
    service: HolidayService = Depends(get_holiday_service),
) -> list[PublicHolidayRead]:
    holidays = await service.list_public_holidays(year)
    return [PublicHolidayRead.model_validate(h) for h in holidays]


@router.post("/public-holidays", response_model=PublicHolidayRead, status_code=status.HTTP_201_CREATED)
async def add_public_holiday(
    body: PublicHolidayCreate,
    _user: User = Depends(get_current_user),
    service: HolidayService = Depends(get_holiday_service),
) -> PublicHolidayRead:
    holiday = await service.add_public_holiday(body.holiday_date, body.name)
    return PublicHolidayRead.model_validate(holiday)


@router.delete("/public-holidays/{holiday_id}", response_model=DeleteResponse)
async def delete_public_holiday(
    holiday_id: int,
    _user: User = Depends(get_current_user),
    service: HolidayService = Depends(get_holiday_service),
) -> DeleteResponse:
    await service.delete_public_holiday(holiday_id)
    return DeleteResponse(success=True, message=f"Public holiday {holiday_id} deleted")
