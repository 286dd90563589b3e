"""
Calendar classification — "what kind of day is this, for this user?"

Weekends come from the day of week alone; public and personal holidays come
from a ``HolidaySource``. Single-day and range classification share
``classify_day`` so every consumer sees the same notion of a holiday.
"""

from __future__ import annotations

import calendar
from collections.abc import Collection, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from worktracker.models.holiday import PublicHoliday


class HolidaySource(Protocol):
    async def public_holidays_for_month(self, year: int, month: int) -> Sequence[PublicHoliday]: ...

    async def public_holidays_between(self, start: date, end: date) -> Sequence[PublicHoliday]: ...

    async def is_personal_holiday(self, user_id: int, day: date) -> bool: ...

    async def personal_holiday_dates_between(self, user_id: int, start: date, end: date) -> set[date]: ...


@dataclass(frozen=True)
class DateClassification:
    day: date
    is_weekend: bool
    is_public_holiday: bool
    is_personal_holiday: bool
    public_holiday_name: str | None = None

    @property
    def is_working_day(self) -> bool:
        return not (self.is_weekend or self.is_public_holiday or self.is_personal_holiday)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5  # Sat=5, Sun=6


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from *start* to *end*, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    _, days_in_month = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, days_in_month)


def count_weekdays(year: int, month: int) -> int:
    """Count business days (Mon-Fri) in a given month."""
    first, last = month_bounds(year, month)
    return sum(1 for day in iter_days(first, last) if not is_weekend(day))


def classify_day(
    day: date,
    public_holidays: Mapping[date, str],
    personal_holidays: Collection[date],
) -> DateClassification:
    return DateClassification(
        day=day,
        is_weekend=is_weekend(day),
        is_public_holiday=day in public_holidays,
        is_personal_holiday=day in personal_holidays,
        public_holiday_name=public_holidays.get(day),
    )


class CalendarClassifier:
    """Classifies dates for a user against the current holiday data."""

    def __init__(self, holidays: HolidaySource) -> None:
        self._holidays = holidays

    async def classify(self, user_id: int, day: date) -> DateClassification:
        month_holidays = await self._holidays.public_holidays_for_month(day.year, day.month)
        public = {ph.holiday_date: ph.name for ph in month_holidays}
        personal = {day} if await self._holidays.is_personal_holiday(user_id, day) else set()
        return classify_day(day, public, personal)

    async def classify_range(self, user_id: int, start: date, end: date) -> list[DateClassification]:
        """Classify every date in ``[start, end]``, oldest first, with two lookups."""
        if end < start:
            return []
        public = {
            ph.holiday_date: ph.name
            for ph in await self._holidays.public_holidays_between(start, end)
        }
        personal = await self._holidays.personal_holiday_dates_between(user_id, start, end)
        return [classify_day(day, public, personal) for day in iter_days(start, end)]
