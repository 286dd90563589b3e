"""
Work hours service — the caller-facing operations of the reconciliation
engine. One instance per request; it wires the classifier, window resolver,
reconciler, stores and aggregators over a single ``AsyncSession``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.clock import Clock
from worktracker.core.config import settings
from worktracker.core.exceptions import (NotFoundError, ValidationError,
                                         storage_guard)
from worktracker.db.transaction import transaction
from worktracker.models.user import User
from worktracker.models.work_entry import WorkEntry
from worktracker.services.calendar import CalendarClassifier
from worktracker.services.editable_window import (EditableWindow,
                                                  EditableWindowResolver,
                                                  WindowDay)
from worktracker.services.entry_store import LocationStore, WorkEntryStore
from worktracker.services.holidays import HolidayRepository
from worktracker.services.location import LocationReconciler, effective_flag
from worktracker.services.missing_days import MissingDay, MissingDayDetector
from worktracker.services.monthly import (CalendarDay, MonthlyAggregator,
                                          MonthlyStats, TeamOverview)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowSlot:
    """One editable-window day with what the user has recorded for it."""

    window_day: WindowDay
    entry: WorkEntry | None
    is_onsite: bool | None


class WorkHoursService:
    def __init__(self, db: AsyncSession, clock: Clock) -> None:
        self._db = db
        self._clock = clock
        self.max_daily_hours = settings.MAX_DAILY_HOURS

        self.holidays = HolidayRepository(db)
        self.classifier = CalendarClassifier(self.holidays)
        self.entries = WorkEntryStore(db)
        self.locations = LocationStore(db)
        self.window_resolver = EditableWindowResolver(self.classifier)
        self.reconciler = LocationReconciler(self.classifier, self.locations)
        self.missing_days = MissingDayDetector(self.classifier, self.window_resolver, self.entries)
        self.monthly = MonthlyAggregator(self.holidays, self.classifier, self.entries)

    # ── Editable window ─────────────────────────────────────────────
    async def get_editable_window(self, user_id: int) -> EditableWindow:
        return await self.window_resolver.resolve(user_id, self._clock.today())

    async def get_window_slots(self, user_id: int) -> tuple[EditableWindow, list[WindowSlot]]:
        window = await self.get_editable_window(user_id)
        entries = {
            e.work_date: e
            for e in await self.entries.find_by_user_and_date_range(user_id, window.oldest, window.today)
        }
        flags = {
            loc.work_date: loc.is_onsite
            for loc in await self.locations.find_by_user_and_date_range(user_id, window.oldest, window.today)
        }
        slots = [
            WindowSlot(
                window_day=wd,
                entry=entries.get(wd.day),
                is_onsite=effective_flag(wd.classification, flags.get(wd.day)),
            )
            for wd in window.days
        ]
        return window, slots

    # ── Entries ─────────────────────────────────────────────────────
    def _validate_hours(self, user_id: int, day: date, hours: float) -> None:
        if not 0 < hours <= self.max_daily_hours:
            raise ValidationError(
                f"Hours must be greater than 0 and at most {self.max_daily_hours:g}",
                user_id=user_id,
                day=day,
                hours=hours,
            )

    async def _require_editable(self, user_id: int, day: date, message: str) -> None:
        window = await self.get_editable_window(user_id)
        if not window.contains(day):
            raise ValidationError(message, user_id=user_id, day=day, oldest_editable=window.oldest)

    async def _owned_entry(self, user_id: int, entry_id: int) -> WorkEntry:
        entry = await self.entries.find_by_id(entry_id)
        if entry is None or entry.user_id != user_id:
            raise NotFoundError("Work entry not found", user_id=user_id, entry_id=entry_id)
        return entry

    async def submit_entry(
        self, user_id: int, day: date, hours: float, is_onsite: bool | None = None
    ) -> WorkEntry:
        self._validate_hours(user_id, day, hours)
        await self._require_editable(user_id, day, "Date is outside the editable window")

        async with transaction(self._db, "work entry submit"):
            entry = await self.entries.upsert(user_id, day, hours=hours)
            await self.reconciler.apply(user_id, day, is_onsite)

        logger.info("User %s logged %.2f h for %s", user_id, hours, day)
        return entry

    async def update_entry(
        self,
        user_id: int,
        entry_id: int,
        hours: float | None = None,
        is_onsite: bool | None = None,
    ) -> WorkEntry:
        entry = await self._owned_entry(user_id, entry_id)
        day = entry.work_date
        if hours is None and is_onsite is None:
            raise ValidationError("Nothing to update", user_id=user_id, day=day)
        if hours is not None:
            self._validate_hours(user_id, day, hours)
        await self._require_editable(user_id, day, "Entry is no longer editable")

        async with transaction(self._db, "work entry update"):
            if hours is not None:
                entry = await self.entries.upsert(user_id, day, hours=hours)
            await self.reconciler.apply(user_id, day, is_onsite)

        logger.info("User %s updated entry %s for %s", user_id, entry_id, day)
        return entry

    async def delete_entry(self, user_id: int, entry_id: int) -> bool:
        entry = await self._owned_entry(user_id, entry_id)
        day = entry.work_date
        await self._require_editable(user_id, day, "Entry is no longer editable")

        async with transaction(self._db, "work entry delete"):
            removed = await self.entries.delete(user_id, day)

        logger.info("User %s deleted entry %s for %s", user_id, entry_id, day)
        return removed

    # ── Reports ─────────────────────────────────────────────────────
    async def get_monthly_stats(self, user_id: int, year: int, month: int) -> MonthlyStats:
        return await self.monthly.aggregate(user_id, year, month)

    async def get_month_calendar(self, user_id: int, year: int, month: int) -> list[CalendarDay]:
        return await self.monthly.calendar(user_id, year, month, self._clock.today())

    async def get_missing_days(self, user_id: int) -> list[MissingDay]:
        return await self.missing_days.find(user_id, self._clock.today())

    async def get_team_overview(self, year: int, month: int) -> TeamOverview:
        stmt = select(User).where(User.is_active.is_(True)).order_by(User.full_name, User.id)
        with storage_guard("active user listing"):
            users = list((await self._db.scalars(stmt)).all())
        return await self.monthly.team_overview(users, year, month)

    async def count_entries_on(self, day: date) -> int:
        stmt = select(func.count(WorkEntry.id)).where(WorkEntry.work_date == day)
        with storage_guard("entry count", day=day):
            return (await self._db.execute(stmt)).scalar_one()
