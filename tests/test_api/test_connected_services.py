"""Tests for connected service endpoints and the Apple Health upload."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from healthhub.models.connected_service import ConnectedService
from healthhub.models.health import HealthMetric
from healthhub.models.insight import Insight
from healthhub.models.user import User
from tests.conftest import test_session

SYNC_PAYLOAD = {
    "activities": [{"date": "2024-01-05", "steps": 8000, "activeEnergyBurned": 300, "activeMinutes": 40}],
    "sleepAnalysis": [
        {"date": "2024-01-05", "totalSleepDuration": 420, "deepSleepDuration": 90, "lightSleepDuration": 330}
    ],
    "heartRate": [{"date": "2024-01-06", "restingHeartRate": "57"}],
}


async def _create_user() -> None:
    async with test_session() as session:
        session.add(User(id="1", email="test@example.com"))
        await session.commit()


async def _all(model: type) -> list:
    async with test_session() as session:
        return list((await session.execute(select(model))).scalars().all())


# ── connect / disconnect ────────────────────────────────────────────


async def test_list_services_empty(client: AsyncClient) -> None:
    response = await client.get("/api/connected-services")
    assert response.status_code == 200
    assert response.json() == []


async def test_connect_service(client: AsyncClient) -> None:
    await _create_user()

    response = await client.post(
        "/api/connected-services/apple_health/connect",
        json={"auth_data": {"auto_sync": True}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["service_name"] == "apple_health"
    assert data["is_connected"] is True
    assert data["last_synced"] is not None
    assert data["auth_data"] == {"auto_sync": True}

    listed = (await client.get("/api/connected-services")).json()
    assert [s["service_name"] for s in listed] == ["apple_health"]


async def test_connect_twice_updates_same_row(client: AsyncClient) -> None:
    await _create_user()

    await client.post("/api/connected-services/apple_health/connect", json={"auth_data": {"auto_sync": True}})
    await client.post("/api/connected-services/apple_health/connect", json={"auth_data": {"auto_sync": False}})

    services = await _all(ConnectedService)
    assert len(services) == 1
    assert services[0].auth_data == {"auto_sync": False}


async def test_disconnect_service(client: AsyncClient) -> None:
    await _create_user()
    await client.post("/api/connected-services/lab_partner/connect", json={"auth_data": {"token": "x"}})

    response = await client.post("/api/connected-services/lab_partner/disconnect")
    assert response.status_code == 200
    assert response.json() == {"message": "lab_partner disconnected successfully"}

    (service,) = await _all(ConnectedService)
    assert service.is_connected is False
    assert service.auth_data == {"token": "x"}


async def test_disconnect_unknown_service(client: AsyncClient) -> None:
    response = await client.post("/api/connected-services/nope/disconnect")
    assert response.status_code == 404
    assert response.json()["detail"] == "Service not found"


# ── POST /api/connected-services/apple_health/sync ──────────────────


async def test_sync_apple_health(client: AsyncClient) -> None:
    await _create_user()

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": SYNC_PAYLOAD})
    assert response.status_code == 200
    data = response.json()
    assert data["metrics_added"] == 2
    assert data["days_processed"] == 2
    assert "2 days" in data["summary"]

    metrics = {m.date: m for m in await _all(HealthMetric)}
    assert metrics["2024-01-05"].steps == 8000
    assert metrics["2024-01-05"].deep_sleep_duration == 90
    assert metrics["2024-01-06"].resting_heart_rate == 57

    (insight,) = await _all(Insight)
    assert insight.severity == "success"


async def test_sync_caches_payload_for_auto_sync(client: AsyncClient) -> None:
    await _create_user()
    await client.post("/api/connected-services/apple_health/connect", json={"auth_data": {"auto_sync": True}})

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": SYNC_PAYLOAD})
    assert response.status_code == 200

    (service,) = await _all(ConnectedService)
    assert service.is_connected is True
    assert service.auth_data["auto_sync"] is True
    assert service.auth_data["last_sync_data"] == SYNC_PAYLOAD


async def test_sync_requires_data(client: AsyncClient) -> None:
    response = await client.post("/api/connected-services/apple_health/sync", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "No Apple Health data provided"


async def test_sync_rejects_bad_date(client: AsyncClient) -> None:
    await _create_user()
    payload = {"activities": [{"date": "2024-1-5", "steps": 100}]}

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": payload})
    assert response.status_code == 400
    assert "2024-1-5" in response.json()["detail"]
    assert await _all(HealthMetric) == []
    assert await _all(Insight) == []


async def test_sync_rejects_non_array_category(client: AsyncClient) -> None:
    await _create_user()
    payload = {"sleepAnalysis": {"date": "2024-01-05"}}

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": payload})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid sleep data: Expected an array"


async def test_sync_storage_failure(client: AsyncClient) -> None:
    await _create_user()
    failing = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))

    with patch("healthhub.storage.batch_upsert_health_metrics", failing):
        response = await client.post(
            "/api/connected-services/apple_health/sync", json={"data": SYNC_PAYLOAD}
        )

    assert response.status_code == 502
    assert "Failed to store Apple Health data" in response.json()["detail"]
    assert await _all(Insight) == []
    assert await _all(ConnectedService) == []


async def test_sync_huge_numbers_default_to_zero(client: AsyncClient) -> None:
    await _create_user()
    payload = {"activities": [{"date": "2024-01-05", "steps": 10**400, "activeMinutes": 40}]}

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": payload})
    assert response.status_code == 200

    (metric,) = await _all(HealthMetric)
    assert metric.steps == 0
    assert metric.active_minutes == 40


async def test_sync_values_too_large_to_store_default_to_zero(client: AsyncClient) -> None:
    await _create_user()
    payload = {
        "activities": [{"date": "2024-01-05", "steps": "1e20", "activeEnergyBurned": 300}],
        "nutrition": [{"date": "2024-01-05", "protein": 1e30, "carbs": 210}],
    }

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": payload})
    assert response.status_code == 200

    (metric,) = await _all(HealthMetric)
    assert metric.steps == 0
    assert metric.calories_burned == 300
    assert metric.protein == 0
    assert metric.carbs == 210


async def test_sync_rejects_non_ascii_digit_date(client: AsyncClient) -> None:
    await _create_user()
    payload = {"activities": [{"date": "٢٠٢٤-٠١-٠٥", "steps": 100}]}

    response = await client.post("/api/connected-services/apple_health/sync", json={"data": payload})
    assert response.status_code == 400
    assert await _all(HealthMetric) == []
