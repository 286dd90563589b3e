"""
Time sources.

Every caller-facing operation receives a ``Clock`` instead of reading the
wall clock itself, so "today" can be pinned in tests.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def today(self) -> date: ...


class SystemClock:
    """Wall clock in the organisation's time zone."""

    def __init__(self, tz_name: str) -> None:
        self._tz = ZoneInfo(tz_name)

    def today(self) -> date:
        return datetime.now(self._tz).date()


class FixedClock:
    """Clock frozen on a given calendar day."""

    def __init__(self, day: date) -> None:
        self.day = day

    def today(self) -> date:
        return self.day
