"""
Missing-day detection — past working days with no hours logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from worktracker.services.calendar import CalendarClassifier
from worktracker.services.editable_window import EditableWindowResolver
from worktracker.services.entry_store import WorkEntryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingDay:
    day: date
    weekday: str


class MissingDayDetector:
    """
    Scans from the user's first logged day up to (not including) the oldest
    date of the editable window. Days inside the window are still open for
    entry, so they are never reported.
    """

    def __init__(
        self,
        classifier: CalendarClassifier,
        window_resolver: EditableWindowResolver,
        entries: WorkEntryStore,
    ) -> None:
        self._classifier = classifier
        self._window_resolver = window_resolver
        self._entries = entries

    async def find(self, user_id: int, as_of: date) -> list[MissingDay]:
        first = await self._entries.first_work_date(user_id)
        if first is None:
            return []

        window = await self._window_resolver.resolve(user_id, as_of)
        end = window.oldest - timedelta(days=1)
        if end < first:
            return []

        logged = {
            e.work_date for e in await self._entries.find_by_user_and_date_range(user_id, first, end)
        }
        missing = [
            MissingDay(day=c.day, weekday=c.day.strftime("%A"))
            for c in await self._classifier.classify_range(user_id, first, end)
            if c.is_working_day and c.day not in logged
        ]
        if missing:
            logger.debug("User %s has %d missing day(s) before %s", user_id, len(missing), window.oldest)
        return missing
