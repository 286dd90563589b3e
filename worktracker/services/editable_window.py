"""
Editable window — the dates a user may still create or change hours for.

The window always contains today and walks backwards one calendar day at a
time until it holds ``EDITABLE_WORKING_DAYS`` working days. Non-working days
crossed on the way (weekends, holidays) stay in the window, so entries on
them remain editable too. The walk is bounded by a maximum look-back; a
window cut short by that bound is flagged as ``truncated``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from worktracker.core.config import settings
from worktracker.services.calendar import CalendarClassifier, DateClassification

logger = logging.getLogger(__name__)


def day_label(today: date, day: date) -> str:
    offset = (today - day).days
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Yesterday"
    return day.strftime("%A")


@dataclass(frozen=True)
class WindowDay:
    classification: DateClassification
    label: str

    @property
    def day(self) -> date:
        return self.classification.day


@dataclass(frozen=True)
class EditableWindow:
    today: date
    days: tuple[WindowDay, ...]  # newest first
    working_days: int
    truncated: bool = False

    @property
    def dates(self) -> list[date]:
        return [d.day for d in self.days]

    @property
    def oldest(self) -> date:
        return self.days[-1].day

    @property
    def yesterday(self) -> date:
        return self.today - timedelta(days=1)

    @property
    def day_before_yesterday(self) -> date:
        return self.today - timedelta(days=2)

    def contains(self, day: date) -> bool:
        return self.oldest <= day <= self.today


class EditableWindowResolver:
    def __init__(
        self,
        classifier: CalendarClassifier,
        *,
        working_days: int | None = None,
        max_lookback_days: int | None = None,
    ) -> None:
        self._classifier = classifier
        self.working_days = (
            working_days if working_days is not None else settings.EDITABLE_WORKING_DAYS
        )
        self.max_lookback_days = (
            max_lookback_days if max_lookback_days is not None
            else settings.EDITABLE_WINDOW_MAX_LOOKBACK_DAYS
        )

    async def resolve(self, user_id: int, today: date) -> EditableWindow:
        earliest = today - timedelta(days=self.max_lookback_days)
        by_day = {
            c.day: c for c in await self._classifier.classify_range(user_id, earliest, today)
        }

        days = [WindowDay(by_day[today], day_label(today, today))]
        working = 1 if by_day[today].is_working_day else 0
        cursor = today
        while working < self.working_days and cursor > earliest:
            cursor -= timedelta(days=1)
            classification = by_day[cursor]
            days.append(WindowDay(classification, day_label(today, cursor)))
            if classification.is_working_day:
                working += 1

        truncated = working < self.working_days
        if truncated:
            logger.warning(
                "Editable window for user %s stopped at %s with %d of %d working days",
                user_id, cursor, working, self.working_days,
            )
        return EditableWindow(
            today=today,
            days=tuple(days),
            working_days=working,
            truncated=truncated,
        )
