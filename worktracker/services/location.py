"""
Location reconciliation — onsite vs. remote per user and date.

Every write that touches a location flag goes through
``LocationReconciler.apply`` so a weekend or holiday can never be stored as
onsite.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.clock import Clock
from worktracker.core.exceptions import ValidationError
from worktracker.db.transaction import transaction
from worktracker.models.work_entry import LocationEntry
from worktracker.services.calendar import (CalendarClassifier,
                                           DateClassification, month_bounds)
from worktracker.services.entry_store import LocationStore
from worktracker.services.holidays import HolidayRepository

logger = logging.getLogger(__name__)

ONSITE = True
REMOTE = False


def reconcile_flag(
    classification: DateClassification,
    requested: bool | None,
    stored: bool | None,
) -> bool:
    if not classification.is_working_day:
        return REMOTE
    if requested is not None:
        return requested
    if stored is not None:
        return stored
    return ONSITE


def effective_flag(classification: DateClassification, stored: bool | None) -> bool | None:
    """Flag as shown to readers: non-working days read as remote, otherwise the stored value."""
    if not classification.is_working_day:
        return REMOTE
    return stored


class LocationReconciler:
    def __init__(self, classifier: CalendarClassifier, locations: LocationStore) -> None:
        self._classifier = classifier
        self._locations = locations

    async def resolve(self, user_id: int, day: date, requested: bool | None = None) -> bool:
        classification = await self._classifier.classify(user_id, day)
        if not classification.is_working_day:
            return REMOTE
        stored = None
        if requested is None:
            existing = await self._locations.find_by_user_and_date(user_id, day)
            stored = existing.is_onsite if existing is not None else None
        return reconcile_flag(classification, requested, stored)

    async def apply(self, user_id: int, day: date, requested: bool | None = None) -> LocationEntry:
        """Resolve the final flag and persist it. Does not commit."""
        final = await self.resolve(user_id, day, requested)
        if requested and not final:
            logger.info("User %s: %s is not a working day, storing remote", user_id, day)
        return await self._locations.upsert(user_id, day, is_onsite=final)


def planning_bounds(today: date) -> tuple[date, date]:
    """First day of the previous month through the last day of the next month."""
    first_of_month = today.replace(day=1)
    prev_first = (first_of_month - timedelta(days=1)).replace(day=1)
    next_any = month_bounds(today.year, today.month)[1] + timedelta(days=1)
    _, next_last = month_bounds(next_any.year, next_any.month)
    return prev_first, next_last


class LocationService:
    """Standalone location planning, independent of hours."""

    def __init__(self, db: AsyncSession, clock: Clock) -> None:
        self._db = db
        self._clock = clock
        self.holidays = HolidayRepository(db)
        self.classifier = CalendarClassifier(self.holidays)
        self.locations = LocationStore(db)
        self.reconciler = LocationReconciler(self.classifier, self.locations)

    def _check_plannable(self, user_id: int, day: date) -> None:
        start, end = planning_bounds(self._clock.today())
        if not start <= day <= end:
            raise ValidationError(
                "Location can only be planned for the previous, current or next month",
                user_id=user_id,
                day=day,
            )

    async def set_location(self, user_id: int, day: date, is_onsite: bool) -> LocationEntry:
        self._check_plannable(user_id, day)
        async with transaction(self._db, "location set"):
            entry = await self.reconciler.apply(user_id, day, is_onsite)
        logger.info(
            "User %s set %s to %s", user_id, day, "onsite" if entry.is_onsite else "remote"
        )
        return entry

    async def clear_location(self, user_id: int, day: date) -> bool:
        self._check_plannable(user_id, day)
        async with transaction(self._db, "location clear"):
            removed = await self.locations.delete(user_id, day)
        if removed:
            logger.info("User %s cleared location for %s", user_id, day)
        return removed

    async def list_locations(self, user_id: int, start: date, end: date) -> list[LocationEntry]:
        if end < start:
            raise ValidationError("End date must not be before start date", user_id=user_id, day=start)
        return await self.locations.find_by_user_and_date_range(user_id, start, end)

    async def list_team_locations(self, start: date, end: date) -> list[LocationEntry]:
        if end < start:
            raise ValidationError("End date must not be before start date", day=start)
        return await self.locations.find_all_by_date_range(start, end)
