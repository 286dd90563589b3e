"""Pydantic schemas for health and status probes."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    db: bool


class StatusResponse(BaseModel):
    version: str
    active_users: int
    entries_today: int
    status: str
