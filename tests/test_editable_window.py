"""Tests for the editable-window resolver."""

import logging
from datetime import date

import pytest

from worktracker.services.calendar import CalendarClassifier
from worktracker.services.editable_window import (EditableWindowResolver,
                                                  day_label)
from worktracker.services.holidays import HolidayRepository


@pytest.fixture
def resolver(db_session):
    return EditableWindowResolver(CalendarClassifier(HolidayRepository(db_session)))


@pytest.mark.asyncio
async def test_midweek_window_is_three_days(resolver, user):
    window = await resolver.resolve(user.id, date(2024, 3, 13))
    assert window.dates == [date(2024, 3, 13), date(2024, 3, 12), date(2024, 3, 11)]
    assert window.working_days == 3
    assert not window.truncated
    assert [d.label for d in window.days] == ["Today", "Yesterday", "Monday"]


@pytest.mark.asyncio
async def test_monday_after_holiday_block_spans_weekend(resolver, seed, user):
    """Thu+Fri public holidays and the weekend sit between Monday and the prior working days."""
    await seed.public_holiday(date(2024, 3, 7), "Holiday One")
    await seed.public_holiday(date(2024, 3, 8), "Holiday Two")

    window = await resolver.resolve(user.id, date(2024, 3, 11))

    assert window.dates == [
        date(2024, 3, 11), date(2024, 3, 10), date(2024, 3, 9),
        date(2024, 3, 8), date(2024, 3, 7), date(2024, 3, 6), date(2024, 3, 5),
    ]
    assert window.working_days == 3
    assert sum(1 for d in window.days if d.classification.is_working_day) == 3
    assert window.oldest == date(2024, 3, 5)


@pytest.mark.asyncio
async def test_today_included_when_not_a_working_day(resolver, user):
    saturday = date(2024, 3, 16)
    window = await resolver.resolve(user.id, saturday)
    assert window.dates[0] == saturday
    assert not window.days[0].classification.is_working_day
    assert window.dates == [saturday, date(2024, 3, 15), date(2024, 3, 14), date(2024, 3, 13)]
    assert window.working_days == 3


@pytest.mark.asyncio
async def test_personal_holiday_extends_window(resolver, seed, user):
    await seed.personal_holiday(user.id, date(2024, 3, 12))
    window = await resolver.resolve(user.id, date(2024, 3, 13))
    assert window.dates == [
        date(2024, 3, 13), date(2024, 3, 12), date(2024, 3, 11),
        date(2024, 3, 10), date(2024, 3, 9), date(2024, 3, 8),
    ]


@pytest.mark.asyncio
async def test_lookback_bound_truncates(db_session, user, caplog):
    resolver = EditableWindowResolver(
        CalendarClassifier(HolidayRepository(db_session)), max_lookback_days=2
    )
    with caplog.at_level(logging.WARNING, logger="worktracker.services.editable_window"):
        window = await resolver.resolve(user.id, date(2024, 3, 11))

    assert window.truncated
    assert window.working_days == 1
    assert window.dates == [date(2024, 3, 11), date(2024, 3, 10), date(2024, 3, 9)]
    assert "stopped at" in caplog.text


@pytest.mark.asyncio
async def test_explicit_zero_quota_keeps_only_today(db_session, user):
    resolver = EditableWindowResolver(
        CalendarClassifier(HolidayRepository(db_session)), working_days=0
    )
    window = await resolver.resolve(user.id, date(2024, 3, 13))

    assert resolver.working_days == 0
    assert window.dates == [date(2024, 3, 13)]
    assert not window.truncated


@pytest.mark.asyncio
async def test_anchor_dates_and_membership(resolver, user):
    window = await resolver.resolve(user.id, date(2024, 3, 13))
    assert window.today == date(2024, 3, 13)
    assert window.yesterday == date(2024, 3, 12)
    assert window.day_before_yesterday == date(2024, 3, 11)
    assert window.contains(date(2024, 3, 11))
    assert not window.contains(date(2024, 3, 10))
    assert not window.contains(date(2024, 3, 14))


def test_day_labels():
    today = date(2024, 3, 13)
    assert day_label(today, today) == "Today"
    assert day_label(today, date(2024, 3, 12)) == "Yesterday"
    assert day_label(today, date(2024, 3, 8)) == "Friday"
