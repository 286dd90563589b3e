"""
Work entry & work location models.

Both tables are keyed by (user_id, work_date); the unique constraints are
the conflict targets of the store's atomic upserts. Location is kept apart
from hours so it can be planned before any hours are known.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Boolean, Column, Date, DateTime, Float, ForeignKey,
                        Index, Integer, UniqueConstraint)

from worktracker.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkEntry(Base):
    __tablename__ = "work_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "work_date", name="uq_work_entry_user_date"),
        Index("ix_work_entry_work_date", "work_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    work_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    hours: float = Column(Float, nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow, nullable=False)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )


class LocationEntry(Base):
    __tablename__ = "work_locations"
    __table_args__ = (
        UniqueConstraint("user_id", "work_date", name="uq_work_location_user_date"),
        Index("ix_work_location_work_date", "work_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    work_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    # NULL = unset, True = onsite, False = remote
    is_onsite: bool | None = Column(Boolean, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow, nullable=False)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
