"""
Domain error taxonomy and global exception handlers.

Services raise the ``WorkTrackerError`` family; the handlers registered here
turn them into JSON responses without leaking stack traces to clients.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class WorkTrackerError(Exception):
    """Base class for every error raised by the reconciliation engine."""

    def __init__(
        self,
        message: str,
        *,
        user_id: int | None = None,
        day: date | None = None,
        operation: str | None = None,
        **extra: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = {
            "user_id": user_id,
            "day": day.isoformat() if day else None,
            "operation": operation,
            **extra,
        }

    def __str__(self) -> str:
        details = ", ".join(f"{k}={v}" for k, v in self.context.items() if v is not None)
        return f"{self.message} ({details})" if details else self.message


class ValidationError(WorkTrackerError):
    """Bad input: hours out of range, date outside the editable window, etc."""


class NotFoundError(WorkTrackerError):
    """The record does not exist or belongs to another user."""


class ConflictError(WorkTrackerError):
    """A write would violate a business invariant."""


class StorageError(WorkTrackerError):
    """The entity store or the holiday data source failed."""


@contextmanager
def storage_guard(operation: str, **context: Any) -> Iterator[None]:
    """Re-raise any SQLAlchemy failure inside the block as ``StorageError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"{operation} failed", operation=operation, **context) from exc


# ── Handlers ────────────────────────────────────────────────────────
_STATUS_BY_ERROR: list[tuple[type[WorkTrackerError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 503),
]


async def _domain_error_handler(_request: Request, exc: WorkTrackerError) -> JSONResponse:
    status_code = next(
        (code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500
    )
    if isinstance(exc, StorageError):
        logger.error("Storage failure: %s", exc, exc_info=exc.__cause__ or exc)
    else:
        logger.info("Rejected request: %s", exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "success": False},
    )


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
        headers=getattr(exc, "headers", None),
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(WorkTrackerError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
