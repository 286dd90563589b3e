"""
The work tracker's async engine and session factory.

One session serves one request; services share it for every lookup and
write in that request, and `db.transaction` decides when it commits.
Pool sizing applies to PostgreSQL (asyncpg) only, so the aiosqlite engine
used in tests keeps SQLAlchemy's defaults.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from worktracker.core.config import settings

engine_args = {
    "echo": False,
    "pool_pre_ping": True,
}

if "postgresql" in settings.DATABASE_URL:
    engine_args.update(
        {
            "pool_size": 20,
            "max_overflow": 10,
            "pool_recycle": 300,
        }
    )

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_args,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
