"""Pydantic schemas for personal and public holidays."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator


# ── Personal holidays ───────────────────────────────────────────────
class HolidayRequest(BaseModel):
    start_date: date
    end_date: date | None = None


class PersonalHolidayRead(BaseModel):
    id: int
    user_id: int
    holiday_date: date
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class HolidayRequestResponse(BaseModel):
    success: bool
    booked: list[PersonalHolidayRead]
    skipped: list[date]


# ── Public holidays ─────────────────────────────────────────────────
class PublicHolidayCreate(BaseModel):
    holiday_date: date
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v


class PublicHolidayRead(BaseModel):
    id: int
    holiday_date: date
    name: str

    model_config = {"from_attributes": True}
