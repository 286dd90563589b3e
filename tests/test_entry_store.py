"""Tests for the per-user, per-date entry stores."""

import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)

from worktracker.db.base import Base
from worktracker.models import User, WorkEntry
from worktracker.services.entry_store import LocationStore, WorkEntryStore

DAY = date(2024, 3, 13)


async def _count_entries(session: AsyncSession) -> int:
    return (await session.execute(select(func.count(WorkEntry.id)))).scalar_one()


@pytest.mark.asyncio
async def test_upsert_twice_keeps_one_row(db_session, user):
    store = WorkEntryStore(db_session)
    first = await store.upsert(user.id, DAY, hours=8.0)
    second = await store.upsert(user.id, DAY, hours=8.0)
    await db_session.commit()

    assert first.id == second.id
    assert await _count_entries(db_session) == 1


@pytest.mark.asyncio
async def test_upsert_updates_hours_and_keeps_created_at(db_session, user):
    store = WorkEntryStore(db_session)
    original = await store.upsert(user.id, DAY, hours=4.0)
    created_at = original.created_at
    await db_session.commit()

    updated = await store.upsert(user.id, DAY, hours=6.5)
    await db_session.commit()

    assert updated.hours == 6.5
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


@pytest.mark.asyncio
async def test_upsert_rejects_unknown_field(db_session, user):
    with pytest.raises(TypeError):
        await WorkEntryStore(db_session).upsert(user.id, DAY, is_onsite=True)


@pytest.mark.asyncio
async def test_range_queries(db_session, seed, user):
    other = await seed.user("bob@example.com")
    await seed.entry(user.id, date(2024, 3, 11), 7.0)
    await seed.entry(user.id, date(2024, 3, 13), 8.0)
    await seed.entry(user.id, date(2024, 4, 1), 8.0)
    await seed.entry(other.id, date(2024, 3, 12), 5.0)
    store = WorkEntryStore(db_session)

    mine = await store.find_by_user_and_date_range(user.id, date(2024, 3, 1), date(2024, 3, 31))
    assert [e.work_date for e in mine] == [date(2024, 3, 11), date(2024, 3, 13)]

    everyone = await store.find_all_by_date_range(date(2024, 3, 1), date(2024, 3, 31))
    assert len(everyone) == 3

    assert (await store.find_by_user_and_date(user.id, date(2024, 3, 11))).hours == 7.0
    assert await store.find_by_user_and_date(user.id, date(2024, 3, 12)) is None
    assert await store.first_work_date(user.id) == date(2024, 3, 11)
    assert await store.first_work_date(9999) is None


@pytest.mark.asyncio
async def test_delete_is_idempotent(db_session, seed, user):
    await seed.entry(user.id, DAY)
    store = WorkEntryStore(db_session)

    assert await store.delete(user.id, DAY) is True
    assert await store.delete(user.id, DAY) is False
    await db_session.commit()
    assert await store.find_by_user_and_date(user.id, DAY) is None


@pytest.mark.asyncio
async def test_location_store_keeps_null_flag(db_session, user):
    store = LocationStore(db_session)
    entry = await store.upsert(user.id, DAY, is_onsite=None)
    await db_session.commit()
    assert entry.is_onsite is None


@pytest.mark.asyncio
async def test_concurrent_upserts_converge_to_one_row(tmp_path):
    """Two sessions writing the same (user, date) at once must not create duplicates."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        racer = User(email="racer@example.com")
        session.add(racer)
        await session.commit()

    async def submit(hours: float) -> None:
        async with factory() as session:
            await WorkEntryStore(session).upsert(racer.id, DAY, hours=hours)
            await session.commit()

    await asyncio.gather(submit(8.0), submit(6.0))

    async with factory() as session:
        rows = list((await session.scalars(select(WorkEntry))).all())
    await engine.dispose()

    assert len(rows) == 1
    assert rows[0].hours in (8.0, 6.0)
