"""Tests for the health event calendar endpoints."""

from httpx import AsyncClient

from healthhub.models.health_event import HealthEvent
from healthhub.models.user import User
from tests.conftest import test_session


async def _create_user() -> None:
    async with test_session() as session:
        session.add(User(id="1", email="test@example.com"))
        await session.commit()


async def _create_event(client: AsyncClient, **fields: object) -> dict:
    body = {"title": "Blood panel", "date": "2024-01-10", **fields}
    response = await client.post("/api/health-events", json=body)
    assert response.status_code == 201
    return response.json()


# ── create / list ───────────────────────────────────────────────────


async def test_create_event(client: AsyncClient) -> None:
    await _create_user()

    event = await _create_event(
        client, description="Fasting", time="08:30", location="City Lab"
    )
    assert event["title"] == "Blood panel"
    assert event["date"] == "2024-01-10"
    assert event["time"] == "08:30"
    assert event["location"] == "City Lab"
    assert event["user_id"] == "1"


async def test_create_event_validates_fields(client: AsyncClient) -> None:
    bad_bodies = [
        {"date": "2024-01-10"},
        {"title": "", "date": "2024-01-10"},
        {"title": "Checkup", "date": "10/01/2024"},
        {"title": "Checkup", "date": "2024-01-10", "time": "8am"},
    ]
    for body in bad_bodies:
        response = await client.post("/api/health-events", json=body)
        assert response.status_code == 422, body


async def test_list_events_in_calendar_order(client: AsyncClient) -> None:
    await _create_user()
    await _create_event(client, title="Dentist", date="2024-01-12")
    await _create_event(client, title="Physio", date="2024-01-10", time="15:00")
    await _create_event(client, title="Blood panel", date="2024-01-10", time="08:30")

    response = await client.get("/api/health-events")
    assert response.status_code == 200
    assert [e["title"] for e in response.json()] == ["Blood panel", "Physio", "Dentist"]


async def test_list_events_date_range(client: AsyncClient) -> None:
    await _create_user()
    for date in ["2024-01-05", "2024-01-10", "2024-01-15"]:
        await _create_event(client, date=date)

    response = await client.get("/api/health-events?start_date=2024-01-06&end_date=2024-01-15")
    assert [e["date"] for e in response.json()] == ["2024-01-10", "2024-01-15"]

    response = await client.get("/api/health-events?start_date=2024-01-10")
    assert [e["date"] for e in response.json()] == ["2024-01-10", "2024-01-15"]


async def test_list_events_only_current_user(client: AsyncClient) -> None:
    async with test_session() as session:
        session.add(User(id="2", email="other@example.com"))
        session.add(HealthEvent(user_id="2", title="Not yours", date="2024-01-10"))
        await session.commit()

    response = await client.get("/api/health-events")
    assert response.json() == []


# ── update / delete ─────────────────────────────────────────────────


async def test_update_event_is_partial(client: AsyncClient) -> None:
    await _create_user()
    event = await _create_event(client, location="City Lab")

    response = await client.put(f"/api/health-events/{event['id']}", json={"date": "2024-01-11"})
    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2024-01-11"
    assert data["title"] == "Blood panel"
    assert data["location"] == "City Lab"


async def test_update_event_can_clear_optional_fields(client: AsyncClient) -> None:
    await _create_user()
    event = await _create_event(client, location="City Lab")

    response = await client.put(f"/api/health-events/{event['id']}", json={"location": None})
    assert response.status_code == 200
    assert response.json()["location"] is None


async def test_update_event_rejects_null_required_field(client: AsyncClient) -> None:
    await _create_user()
    event = await _create_event(client)

    response = await client.put(f"/api/health-events/{event['id']}", json={"title": None})
    assert response.status_code == 422


async def test_update_unknown_event(client: AsyncClient) -> None:
    response = await client.put("/api/health-events/999", json={"title": "Dentist"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Health event not found"


async def test_update_other_users_event(client: AsyncClient) -> None:
    async with test_session() as session:
        session.add(User(id="2", email="other@example.com"))
        event = HealthEvent(user_id="2", title="Not yours", date="2024-01-10")
        session.add(event)
        await session.commit()
        event_id = event.id

    response = await client.put(f"/api/health-events/{event_id}", json={"title": "Mine now"})
    assert response.status_code == 404


async def test_delete_event(client: AsyncClient) -> None:
    await _create_user()
    event = await _create_event(client)

    response = await client.delete(f"/api/health-events/{event['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Health event deleted successfully"}
    assert (await client.get("/api/health-events")).json() == []

    response = await client.delete(f"/api/health-events/{event['id']}")
    assert response.status_code == 404
