"""
Work hours endpoints — the editable window and hour entries.
"""

from __future__ import annotations


from fastapi import APIRouter, Depends, status

from worktracker.api.v1.deps import get_current_user, get_work_hours_service
from worktracker.models.user import User
from worktracker.schemas.work import (DeleteResponse, EditableWindowResponse,
                                      WindowDayRead, WorkEntryCreate,
                                      WorkEntryRead, WorkEntryUpdate)
from worktracker.services.work_hours import WorkHoursService

router = APIRouter(prefix="/work-hours", tags=["work-hours"])


@router.get("/window", response_model=EditableWindowResponse)
async def editable_window(
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> EditableWindowResponse:
    """Dates the caller can still log or correct hours for, newest first."""
    window, slots = await service.get_window_slots(user.id)
    return EditableWindowResponse(
        today=window.today,
        yesterday=window.yesterday,
        day_before_yesterday=window.day_before_yesterday,
        working_days=window.working_days,
        truncated=window.truncated,
        days=[
            WindowDayRead(
                day=slot.window_day.day,
                label=slot.window_day.label,
                is_weekend=slot.window_day.classification.is_weekend,
                is_public_holiday=slot.window_day.classification.is_public_holiday,
                is_personal_holiday=slot.window_day.classification.is_personal_holiday,
                is_working_day=slot.window_day.classification.is_working_day,
                public_holiday_name=slot.window_day.classification.public_holiday_name,
                entry=WorkEntryRead.model_validate(slot.entry) if slot.entry else None,
                is_onsite=slot.is_onsite,
            )
            for slot in slots
        ],
    )


@router.post("", response_model=WorkEntryRead, status_code=status.HTTP_201_CREATED)
async def submit_entry(
    body: WorkEntryCreate,
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> WorkEntryRead:
    """Create or overwrite the caller's hours for one date."""
    entry = await service.submit_entry(user.id, body.work_date, body.hours, body.is_onsite)
    return WorkEntryRead.model_validate(entry)


@router.patch("/{entry_id}", response_model=WorkEntryRead)
async def update_entry(
    entry_id: int,
    body: WorkEntryUpdate,
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> WorkEntryRead:
    entry = await service.update_entry(user.id, entry_id, body.hours, body.is_onsite)
    return WorkEntryRead.model_validate(entry)


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_entry(
    entry_id: int,
    user: User = Depends(get_current_user),
    service: WorkHoursService = Depends(get_work_hours_service),
) -> DeleteResponse:
    await service.delete_entry(user.id, entry_id)
    return DeleteResponse(success=True, message=f"Entry {entry_id} deleted")
