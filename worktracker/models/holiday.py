"""
Holiday models — per-user days off and organisation-wide public holidays.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Column, Date, DateTime, ForeignKey, Index, Integer,
                        String, UniqueConstraint)

from worktracker.db.base import Base


class PersonalHoliday(Base):
    __tablename__ = "personal_holidays"
    __table_args__ = (
        UniqueConstraint("user_id", "holiday_date", name="uq_personal_holiday_user_date"),
        Index("ix_personal_holiday_date", "holiday_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    holiday_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class PublicHoliday(Base):
    __tablename__ = "public_holidays"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    holiday_date: date = Column(Date, nullable=False, unique=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
