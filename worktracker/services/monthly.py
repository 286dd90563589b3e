"""
Monthly aggregation — required vs. logged hours, the month calendar view,
and the cross-user team overview.

Public holidays reduce the requirement; personal holidays count toward
fulfilling it. All sums are kept unrounded here; rounding to 2 decimals
happens in the response schemas.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from worktracker.core.config import settings
from worktracker.core.exceptions import ValidationError
from worktracker.models.user import User
from worktracker.services.calendar import (CalendarClassifier,
                                           count_weekdays, is_weekend,
                                           month_bounds)
from worktracker.services.entry_store import WorkEntryStore
from worktracker.services.holidays import HolidayRepository



@dataclass(frozen=True)
class MonthlyStats:
    year: int
    month: int
    weekdays_in_month: int
    public_holiday_count: int
    public_holidays_on_weekdays: int
    personal_holiday_count: int
    standard_daily_hours: float
    required_hours: float
    logged_hours: float
    holiday_hours: float
    public_holiday_hours: float

    @property
    def combined_hours(self) -> float:
        # Public-holiday hours are already taken out of required_hours.
        return self.logged_hours + self.holiday_hours

    @property
    def remaining_hours(self) -> float:
        return max(0.0, self.required_hours - self.combined_hours)


@dataclass(frozen=True)
class CalendarDay:
    day: date
    weekday: str
    hours: float | None
    is_weekend: bool
    is_public_holiday: bool
    is_personal_holiday: bool
    is_working_day: bool
    is_past: bool
    public_holiday_name: str | None = None

    @property
    def needs_attention(self) -> bool:
        return self.is_past and self.is_working_day and self.hours is None


@dataclass
class TeamMemberMonth:
    user: User
    hours_by_date: dict[date, float] = field(default_factory=dict)
    holidays: list[date] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return sum(self.hours_by_date.values())


@dataclass(frozen=True)
class TeamOverview:
    year: int
    month: int
    required_hours: float
    public_holidays: dict[date, str]
    members: list[TeamMemberMonth]


def validate_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year: {year}")


def compute_month_stats(
    year: int,
    month: int,
    *,
    public_holidays: Collection[date],
    personal_holidays: Iterable[date],
    logged_hours: float,
    daily_hours: float,
) -> MonthlyStats:
    weekdays = count_weekdays(year, month)
    public_on_weekdays = sum(1 for d in public_holidays if not is_weekend(d))
    personal_on_weekdays = sum(1 for d in personal_holidays if not is_weekend(d))
    return MonthlyStats(
        year=year,
        month=month,
        weekdays_in_month=weekdays,
        public_holiday_count=len(public_holidays),
        public_holidays_on_weekdays=public_on_weekdays,
        personal_holiday_count=personal_on_weekdays,
        standard_daily_hours=daily_hours,
        required_hours=max(0, weekdays - len(public_holidays)) * daily_hours,
        logged_hours=logged_hours,
        holiday_hours=personal_on_weekdays * daily_hours,
        public_holiday_hours=public_on_weekdays * daily_hours,
    )


class MonthlyAggregator:
    def __init__(
        self,
        holidays: HolidayRepository,
        classifier: CalendarClassifier,
        entries: WorkEntryStore,
        *,
        daily_hours: float | None = None,
    ) -> None:
        self._holidays = holidays
        self._classifier = classifier
        self._entries = entries
        self.daily_hours = daily_hours if daily_hours is not None else settings.STANDARD_DAILY_HOURS

    async def aggregate(self, user_id: int, year: int, month: int) -> MonthlyStats:
        validate_month(year, month)
        first, last = month_bounds(year, month)
        public = await self._holidays.public_holidays_for_month(year, month)
        personal = await self._holidays.personal_holiday_dates_between(user_id, first, last)
        entries = await self._entries.find_by_user_and_date_range(user_id, first, last)
        return compute_month_stats(
            year,
            month,
            public_holidays={ph.holiday_date for ph in public},
            personal_holidays=personal,
            logged_hours=sum(e.hours for e in entries),
            daily_hours=self.daily_hours,
        )

    async def calendar(self, user_id: int, year: int, month: int, today: date) -> list[CalendarDay]:
        validate_month(year, month)
        first, last = month_bounds(year, month)
        hours = {
            e.work_date: e.hours
            for e in await self._entries.find_by_user_and_date_range(user_id, first, last)
        }
        return [
            CalendarDay(
                day=c.day,
                weekday=c.day.strftime("%A"),
                hours=hours.get(c.day),
                is_weekend=c.is_weekend,
                is_public_holiday=c.is_public_holiday,
                is_personal_holiday=c.is_personal_holiday,
                is_working_day=c.is_working_day,
                is_past=c.day < today,
                public_holiday_name=c.public_holiday_name,
            )
            for c in await self._classifier.classify_range(user_id, first, last)
        ]

    async def team_overview(self, users: Sequence[User], year: int, month: int) -> TeamOverview:
        validate_month(year, month)
        first, last = month_bounds(year, month)
        public = {
            ph.holiday_date: ph.name
            for ph in await self._holidays.public_holidays_for_month(year, month)
        }

        members = {u.id: TeamMemberMonth(user=u) for u in users}
        for entry in await self._entries.find_all_by_date_range(first, last):
            if entry.user_id in members:
                members[entry.user_id].hours_by_date[entry.work_date] = entry.hours

        holidays_by_user: dict[int, list[date]] = defaultdict(list)
        for holiday in await self._holidays.all_personal_holidays_between(first, last):
            holidays_by_user[holiday.user_id].append(holiday.holiday_date)
        for user_id, days in holidays_by_user.items():
            if user_id in members:
                members[user_id].holidays = days

        required = max(0, count_weekdays(year, month) - len(public)) * self.daily_hours
        return TeamOverview(
            year=year,
            month=month,
            required_hours=required,
            public_holidays=public,
            members=list(members.values()),
        )
