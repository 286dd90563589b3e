"""
Dialect-aware INSERT ... ON CONFLICT builder.

PostgreSQL (production) and SQLite (tests) both support ``ON CONFLICT`` but
expose it through their own ``insert`` constructs.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from worktracker.core.exceptions import StorageError

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(db: AsyncSession, model: Any) -> Any:
    """Return an ``insert(model)`` that supports ``on_conflict_do_*`` for the bound dialect."""
    dialect = db.get_bind().dialect.name
    builder = _INSERTS.get(dialect)
    if builder is None:
        raise StorageError(f"Upsert is not supported on dialect '{dialect}'", operation="upsert")
    return builder(model)
