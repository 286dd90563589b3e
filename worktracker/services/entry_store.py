"""
Entry stores — persistence for per-user, per-date records.

Work hours and work location share one shape: at most one row per
(user_id, work_date). Writes are single-statement upserts against that
unique key, so concurrent submissions for the same day converge to one row
holding the last writer's values. Stores never commit; the calling service
owns the transaction.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.exceptions import storage_guard
from worktracker.db.upsert import dialect_insert
from worktracker.models.work_entry import LocationEntry, WorkEntry

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", WorkEntry, LocationEntry)


class EntryStore(Generic[EntryT]):
    model: ClassVar[type]
    value_fields: ClassVar[tuple[str, ...]]

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def upsert(self, user_id: int, day: date, **values: Any) -> EntryT:
        """Insert or update the row for (user_id, day) in one atomic statement."""
        unknown = set(values) - set(self.value_fields)
        if unknown:
            raise TypeError(f"{self.model.__name__} has no field(s): {', '.join(sorted(unknown))}")

        now = datetime.now(timezone.utc)
        stmt = dialect_insert(self._db, self.model).values(
            user_id=user_id,
            work_date=day,
            created_at=now,
            updated_at=now,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "work_date"],
            set_={
                **{name: stmt.excluded[name] for name in values},
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(self.model)

        with storage_guard(f"{self.model.__tablename__} upsert", user_id=user_id, day=day):
            result = await self._db.scalars(
                stmt, execution_options={"populate_existing": True}
            )
            row = result.one()
        logger.debug("Upserted %s for user %s on %s", self.model.__name__, user_id, day)
        return row

    async def find_by_id(self, entry_id: int) -> EntryT | None:
        with storage_guard(f"{self.model.__tablename__} lookup", entry_id=entry_id):
            return await self._db.get(self.model, entry_id)

    async def find_by_user_and_date(self, user_id: int, day: date) -> EntryT | None:
        stmt = select(self.model).where(
            self.model.user_id == user_id,
            self.model.work_date == day,
        )
        with storage_guard(f"{self.model.__tablename__} lookup", user_id=user_id, day=day):
            return (await self._db.execute(stmt)).scalar_one_or_none()

    async def find_by_user_and_date_range(self, user_id: int, start: date, end: date) -> list[EntryT]:
        stmt = (
            select(self.model)
            .where(
                self.model.user_id == user_id,
                self.model.work_date >= start,
                self.model.work_date <= end,
            )
            .order_by(self.model.work_date)
        )
        with storage_guard(f"{self.model.__tablename__} range query", user_id=user_id):
            return list((await self._db.scalars(stmt)).all())

    async def find_all_by_date_range(self, start: date, end: date) -> list[EntryT]:
        stmt = (
            select(self.model)
            .where(self.model.work_date >= start, self.model.work_date <= end)
            .order_by(self.model.user_id, self.model.work_date)
        )
        with storage_guard(f"{self.model.__tablename__} range query"):
            return list((await self._db.scalars(stmt)).all())

    async def first_work_date(self, user_id: int) -> date | None:
        stmt = select(func.min(self.model.work_date)).where(self.model.user_id == user_id)
        with storage_guard(f"{self.model.__tablename__} first date", user_id=user_id):
            return (await self._db.execute(stmt)).scalar_one_or_none()

    async def delete(self, user_id: int, day: date) -> bool:
        """Remove the row for (user_id, day). Returns whether a row existed."""
        stmt = delete(self.model).where(
            self.model.user_id == user_id,
            self.model.work_date == day,
        )
        with storage_guard(f"{self.model.__tablename__} delete", user_id=user_id, day=day):
            result = await self._db.execute(stmt)
        return bool(result.rowcount)


class WorkEntryStore(EntryStore[WorkEntry]):
    model = WorkEntry
    value_fields = ("hours",)


class LocationStore(EntryStore[LocationEntry]):
    model = LocationEntry
    value_fields = ("is_onsite",)
