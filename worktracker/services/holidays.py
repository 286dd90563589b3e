"""
Holiday data — the source the calendar classifier reads from, plus the
management operations behind the /holidays and /public-holidays routes.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import extract, select
from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.exceptions import (ConflictError, NotFoundError,
                                         ValidationError, storage_guard)
from worktracker.db.transaction import transaction
from worktracker.db.upsert import dialect_insert
from worktracker.models.holiday import PersonalHoliday, PublicHoliday
from worktracker.services.calendar import is_weekend, iter_days, month_bounds

logger = logging.getLogger(__name__)

MAX_REQUEST_SPAN_DAYS = 366


class HolidayRepository:
    """SQL-backed holiday source. Never commits."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    # ── Public holidays ─────────────────────────────────────────────
    async def public_holidays_for_month(self, year: int, month: int) -> list[PublicHoliday]:
        first, last = month_bounds(year, month)
        return await self.public_holidays_between(first, last)

    async def public_holidays_between(self, start: date, end: date) -> list[PublicHoliday]:
        stmt = (
            select(PublicHoliday)
            .where(PublicHoliday.holiday_date >= start, PublicHoliday.holiday_date <= end)
            .order_by(PublicHoliday.holiday_date)
        )
        with storage_guard("public holiday lookup"):
            return list((await self._db.scalars(stmt)).all())

    async def list_public_holidays(self, year: int | None = None) -> list[PublicHoliday]:
        stmt = select(PublicHoliday).order_by(PublicHoliday.holiday_date)
        if year is not None:
            stmt = stmt.where(extract("year", PublicHoliday.holiday_date) == year)
        with storage_guard("public holiday listing"):
            return list((await self._db.scalars(stmt)).all())

    async def get_public_holiday(self, holiday_id: int) -> PublicHoliday | None:
        with storage_guard("public holiday lookup"):
            return await self._db.get(PublicHoliday, holiday_id)

    async def add_public_holiday(self, day: date, name: str) -> PublicHoliday | None:
        """Insert a public holiday. Returns None when the date is already taken."""
        stmt = (
            dialect_insert(self._db, PublicHoliday)
            .values(holiday_date=day, name=name)
            .on_conflict_do_nothing(index_elements=["holiday_date"])
            .returning(PublicHoliday)
        )
        with storage_guard("public holiday insert", day=day):
            return (await self._db.scalars(stmt)).one_or_none()

    async def delete_public_holiday(self, holiday: PublicHoliday) -> None:
        with storage_guard("public holiday delete", day=holiday.holiday_date):
            await self._db.delete(holiday)
            await self._db.flush()

    # ── Personal holidays ───────────────────────────────────────────
    async def is_personal_holiday(self, user_id: int, day: date) -> bool:
        stmt = select(PersonalHoliday.id).where(
            PersonalHoliday.user_id == user_id,
            PersonalHoliday.holiday_date == day,
        )
        with storage_guard("personal holiday lookup", user_id=user_id, day=day):
            return (await self._db.execute(stmt)).first() is not None

    async def personal_holidays_between(self, user_id: int, start: date, end: date) -> list[PersonalHoliday]:
        stmt = (
            select(PersonalHoliday)
            .where(
                PersonalHoliday.user_id == user_id,
                PersonalHoliday.holiday_date >= start,
                PersonalHoliday.holiday_date <= end,
            )
            .order_by(PersonalHoliday.holiday_date)
        )
        with storage_guard("personal holiday lookup", user_id=user_id):
            return list((await self._db.scalars(stmt)).all())

    async def personal_holiday_dates_between(self, user_id: int, start: date, end: date) -> set[date]:
        return {h.holiday_date for h in await self.personal_holidays_between(user_id, start, end)}

    async def all_personal_holidays_between(self, start: date, end: date) -> list[PersonalHoliday]:
        stmt = (
            select(PersonalHoliday)
            .where(PersonalHoliday.holiday_date >= start, PersonalHoliday.holiday_date <= end)
            .order_by(PersonalHoliday.user_id, PersonalHoliday.holiday_date)
        )
        with storage_guard("personal holiday lookup"):
            return list((await self._db.scalars(stmt)).all())

    async def get_personal_holiday(self, holiday_id: int) -> PersonalHoliday | None:
        with storage_guard("personal holiday lookup"):
            return await self._db.get(PersonalHoliday, holiday_id)

    async def add_personal_holiday(self, user_id: int, day: date) -> PersonalHoliday:
        """Idempotent insert: an existing (user, day) row is returned unchanged."""
        stmt = dialect_insert(self._db, PersonalHoliday).values(user_id=user_id, holiday_date=day)
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "holiday_date"])
        with storage_guard("personal holiday insert", user_id=user_id, day=day):
            await self._db.execute(stmt)
            found = await self._db.execute(
                select(PersonalHoliday).where(
                    PersonalHoliday.user_id == user_id,
                    PersonalHoliday.holiday_date == day,
                )
            )
            return found.scalar_one()

    async def delete_personal_holiday(self, holiday: PersonalHoliday) -> None:
        with storage_guard("personal holiday delete", user_id=holiday.user_id, day=holiday.holiday_date):
            await self._db.delete(holiday)
            await self._db.flush()


class HolidayService:
    """Request, cancel and list holidays. Each write is one committed transaction."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self.repository = HolidayRepository(db)

    async def request_personal_holidays(
        self, user_id: int, start: date, end: date | None = None
    ) -> tuple[list[PersonalHoliday], list[date]]:
        """
        Book every working day in ``[start, end]`` as a personal holiday.

        Weekends and public holidays inside the range are skipped and
        returned as the second element. The start date itself must be a
        weekday that is not a public holiday. Re-booking a day already
        booked is a no-op.
        """
        end = end or start
        if end < start:
            raise ValidationError("End date must not be before start date", user_id=user_id, day=start)
        if (end - start).days >= MAX_REQUEST_SPAN_DAYS:
            raise ValidationError("Holiday request spans too many days", user_id=user_id, day=start)
        if is_weekend(start):
            raise ValidationError("Holidays cannot start on a weekend", user_id=user_id, day=start)

        public = {
            ph.holiday_date for ph in await self.repository.public_holidays_between(start, end)
        }
        if start in public:
            raise ValidationError("Holidays cannot start on a public holiday", user_id=user_id, day=start)

        bookable: list[date] = []
        skipped: list[date] = []
        for day in iter_days(start, end):
            (skipped if is_weekend(day) or day in public else bookable).append(day)

        async with transaction(self._db, "personal holiday request"):
            created = [await self.repository.add_personal_holiday(user_id, d) for d in bookable]

        logger.info("User %s booked %d holiday day(s) %s..%s", user_id, len(created), start, end)
        return created, skipped

    async def cancel_personal_holiday(self, user_id: int, holiday_id: int) -> None:
        holiday = await self.repository.get_personal_holiday(holiday_id)
        if holiday is None or holiday.user_id != user_id:
            raise NotFoundError("Holiday not found", user_id=user_id, holiday_id=holiday_id)
        day = holiday.holiday_date
        async with transaction(self._db, "personal holiday cancel"):
            await self.repository.delete_personal_holiday(holiday)
        logger.info("User %s cancelled holiday on %s", user_id, day)

    async def list_personal_holidays(
        self, user_id: int, start: date | None = None, end: date | None = None
    ) -> list[PersonalHoliday]:
        return await self.repository.personal_holidays_between(
            user_id, start or date.min, end or date.max
        )

    async def add_public_holiday(self, day: date, name: str) -> PublicHoliday:
        name = name.strip()
        if not name:
            raise ValidationError("Public holiday name is required", day=day)
        async with transaction(self._db, "public holiday insert"):
            holiday = await self.repository.add_public_holiday(day, name)
            if holiday is None:
                raise ConflictError("A public holiday already exists on this date", day=day)
        logger.info("Added public holiday '%s' on %s", name, day)
        return holiday

    async def delete_public_holiday(self, holiday_id: int) -> None:
        holiday = await self.repository.get_public_holiday(holiday_id)
        if holiday is None:
            raise NotFoundError("Public holiday not found", holiday_id=holiday_id)
        day = holiday.holiday_date
        async with transaction(self._db, "public holiday delete"):
            await self.repository.delete_public_holiday(holiday)
        logger.info("Deleted public holiday on %s", day)

    async def list_public_holidays(self, year: int | None = None) -> list[PublicHoliday]:
        return await self.repository.list_public_holidays(year)
