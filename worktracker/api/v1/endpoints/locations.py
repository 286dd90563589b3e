"""
Work location endpoints — plan onsite / remote days ahead of logging hours.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from worktracker.api.v1.deps import get_current_user, get_location_service
from worktracker.models.user import User
from worktracker.schemas.work import (LocationClearResponse, LocationRead,
                                      LocationSet)
from worktracker.services.location import LocationService

router = APIRouter(prefix="/work-locations", tags=["work-locations"])


@router.get("", response_model=list[LocationRead])
async def list_locations(
    start: date = Query(...),
    end: date = Query(...),
    user: User = Depends(get_current_user),
    service: LocationService = Depends(get_location_service),
) -> list[LocationRead]:
    entries = await service.list_locations(user.id, start, end)
    return [LocationRead.model_validate(e) for e in entries]


@router.post("", response_model=LocationRead)
async def set_location(
    body: LocationSet,
    user: User = Depends(get_current_user),
    service: LocationService = Depends(get_location_service),
) -> LocationRead:
    """Store the caller's onsite flag for a date. Weekends and holidays are always stored as remote."""
    entry = await service.set_location(user.id, body.work_date, body.is_onsite)
    return LocationRead.model_validate(entry)


@router.get("/team", response_model=list[LocationRead])
async def team_locations(
    start: date = Query(...),
    end: date = Query(...),
    _user: User = Depends(get_current_user),
    service: LocationService = Depends(get_location_service),
) -> list[LocationRead]:
    entries = await service.list_team_locations(start, end)
    return [LocationRead.model_validate(e) for e in entries]


@router.delete("/{work_date}", response_model=LocationClearResponse)
async def clear_location(
    work_date: date,
    user: User = Depends(get_current_user),
    service: LocationService = Depends(get_location_service),
) -> LocationClearResponse:
    removed = await service.clear_location(user.id, work_date)
    return LocationClearResponse(success=True, removed=removed)
