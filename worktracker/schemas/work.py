"""Pydantic schemas for work entries, the editable window and reports."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Hour figures are kept unrounded internally and rounded only on the way out
Hours = Annotated[float, PlainSerializer(lambda v: round(v, 2), return_type=float)]


# ── Work entries ────────────────────────────────────────────────────
class WorkEntryCreate(BaseModel):
    work_date: date
    hours: float
    is_onsite: bool | None = None


class WorkEntryUpdate(BaseModel):
    hours: float | None = None
    is_onsite: bool | None = None


class WorkEntryRead(BaseModel):
    id: int
    user_id: int
    work_date: date
    hours: Hours
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    success: bool
    message: str


# ── Editable window ─────────────────────────────────────────────────
class WindowDayRead(BaseModel):
    day: date
    label: str
    is_weekend: bool
    is_public_holiday: bool
    is_personal_holiday: bool
    is_working_day: bool
    public_holiday_name: str | None = None
    entry: WorkEntryRead | None = None
    is_onsite: bool | None = None


class EditableWindowResponse(BaseModel):
    today: date
    yesterday: date
    day_before_yesterday: date
    working_days: int
    truncated: bool
    days: list[WindowDayRead]


# ── Monthly stats ───────────────────────────────────────────────────
class MonthlyStatsResponse(BaseModel):
    year: int
    month: int
    weekdays_in_month: int
    public_holiday_count: int
    public_holidays_on_weekdays: int
    personal_holiday_count: int
    standard_daily_hours: Hours
    required_hours: Hours
    logged_hours: Hours
    holiday_hours: Hours
    public_holiday_hours: Hours
    combined_hours: Hours
    remaining_hours: Hours

    model_config = {"from_attributes": True}


# ── Month calendar ──────────────────────────────────────────────────
class CalendarDayRead(BaseModel):
    day: date
    weekday: str
    hours: Hours | None = None
    is_weekend: bool
    is_public_holiday: bool
    is_personal_holiday: bool
    is_working_day: bool
    is_past: bool
    needs_attention: bool
    public_holiday_name: str | None = None

    model_config = {"from_attributes": True}


class MonthCalendarResponse(BaseModel):
    year: int
    month: int
    days: list[CalendarDayRead]


# ── Missing days ────────────────────────────────────────────────────
class MissingDayRead(BaseModel):
    day: date
    weekday: str

    model_config = {"from_attributes": True}


class MissingDaysResponse(BaseModel):
    count: int
    days: list[MissingDayRead]


# ── Team overview ───────────────────────────────────────────────────
class TeamMemberRead(BaseModel):
    user_id: int
    email: str
    full_name: str | None
    total_hours: Hours
    hours_by_date: dict[date, Hours]
    holidays: list[date]


class TeamOverviewResponse(BaseModel):
    year: int
    month: int
    required_hours: Hours
    public_holidays: dict[date, str]
    members: list[TeamMemberRead]


# ── Work location ───────────────────────────────────────────────────
class LocationSet(BaseModel):
    work_date: date
    is_onsite: bool


class LocationRead(BaseModel):
    user_id: int
    work_date: date
    is_onsite: bool | None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class LocationClearResponse(BaseModel):
    success: bool
    removed: bool
