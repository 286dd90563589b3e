"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from worktracker.api.v1.endpoints import holidays, locations, reports, work_hours

api_router = APIRouter()

# Editable window and hour entries
api_router.include_router(work_hours.router)

# Onsite / remote planning
api_router.include_router(locations.router)

# Personal and public holidays
api_router.include_router(holidays.router)

# Monthly stats, calendar, missing days, team, health, status
api_router.include_router(reports.router)
