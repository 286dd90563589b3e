"""
Unit-of-work helper: commit on success, roll back on any failure.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.exceptions import storage_guard


@asynccontextmanager
async def transaction(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    try:
        yield db
        with storage_guard(f"{operation} commit"):
            await db.commit()
    except Exception:
        await db.rollback()
        raise
