"""Tests for the /holidays and /public-holidays endpoints."""

from datetime import date

import pytest
from httpx import AsyncClient


# ── Personal holidays ───────────────────────────────────────────────
@pytest.mark.asyncio
async def test_request_range_skips_weekend_and_public_holiday(async_client: AsyncClient, seed):
    await seed.public_holiday(date(2024, 3, 18), "Spring Monday")

    resp = await async_client.post(
        "/api/v1/holidays", json={"start_date": "2024-03-15", "end_date": "2024-03-19"}
    )
    assert resp.status_code == 201
    data = resp.json()
    assert [h["holiday_date"] for h in data["booked"]] == ["2024-03-15", "2024-03-19"]
    assert data["skipped"] == ["2024-03-16", "2024-03-17", "2024-03-18"]


@pytest.mark.asyncio
async def test_request_is_idempotent(async_client: AsyncClient):
    first = await async_client.post("/api/v1/holidays", json={"start_date": "2024-03-15"})
    second = await async_client.post("/api/v1/holidays", json={"start_date": "2024-03-15"})
    assert first.json()["booked"][0]["id"] == second.json()["booked"][0]["id"]

    resp = await async_client.get("/api/v1/holidays")
    assert len(resp.json()) == 1


@pytest.mark.asyncio
async def test_request_starting_on_weekend_rejected(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/holidays", json={"start_date": "2024-03-16"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_request_starting_on_public_holiday_rejected(async_client: AsyncClient, seed):
    await seed.public_holiday(date(2024, 3, 18), "Spring Monday")
    resp = await async_client.post("/api/v1/holidays", json={"start_date": "2024-03-18"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_inverted_range_rejected(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/holidays", json={"start_date": "2024-03-19", "end_date": "2024-03-15"}
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_holidays_filtered_by_range(async_client: AsyncClient):
    await async_client.post(
        "/api/v1/holidays", json={"start_date": "2024-03-14", "end_date": "2024-03-15"}
    )
    resp = await async_client.get(
        "/api/v1/holidays", params={"start": "2024-03-15", "end": "2024-03-31"}
    )
    assert [h["holiday_date"] for h in resp.json()] == ["2024-03-15"]


@pytest.mark.asyncio
async def test_cancel_holiday(async_client: AsyncClient, seed):
    booked = await async_client.post("/api/v1/holidays", json={"start_date": "2024-03-15"})
    holiday_id = booked.json()["booked"][0]["id"]

    resp = await async_client.delete(f"/api/v1/holidays/{holiday_id}")
    assert resp.status_code == 200
    assert (await async_client.get("/api/v1/holidays")).json() == []

    other = await seed.user("bob@example.com")
    theirs = await seed.personal_holiday(other.id, date(2024, 3, 15))
    resp = await async_client.delete(f"/api/v1/holidays/{theirs.id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_holiday_changes_window(async_client: AsyncClient):
    await async_client.post("/api/v1/holidays", json={"start_date": "2024-03-12"})
    resp = await async_client.get("/api/v1/work-hours/window")
    days = resp.json()["days"]
    assert days[1]["is_personal_holiday"] is True
    assert days[-1]["day"] == "2024-03-08"


# ── Public holidays ─────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_public_holiday_lifecycle(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/public-holidays", json={"holiday_date": "2024-05-01", "name": "Labour Day"}
    )
    assert resp.status_code == 201
    holiday_id = resp.json()["id"]

    dup = await async_client.post(
        "/api/v1/public-holidays", json={"holiday_date": "2024-05-01", "name": "Again"}
    )
    assert dup.status_code == 409

    resp = await async_client.get("/api/v1/public-holidays", params={"year": 2024})
    assert [h["name"] for h in resp.json()] == ["Labour Day"]
    resp = await async_client.get("/api/v1/public-holidays", params={"year": 2025})
    assert resp.json() == []

    resp = await async_client.delete(f"/api/v1/public-holidays/{holiday_id}")
    assert resp.status_code == 200
    resp = await async_client.delete(f"/api/v1/public-holidays/{holiday_id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_public_holiday_requires_name(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/public-holidays", json={"holiday_date": "2024-05-01", "name": "   "}
    )
    assert resp.status_code == 422
