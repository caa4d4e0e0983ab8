"""Tests for the daily Apple Health auto-sync job."""

import asyncio
from datetime import datetime
from typing import Any

from sqlalchemy import select

from healthhub.config import Settings
from healthhub.models.connected_service import ConnectedService
from healthhub.models.health import HealthMetric
from healthhub.models.user import User
from healthhub.scheduler import TaskScheduler
from healthhub.sources.apple_health.auto_sync import (
    DAILY_SYNC_TASK_ID,
    init_scheduled_tasks,
    run_daily_apple_health_sync,
)
from tests.conftest import test_session

GOOD_PAYLOAD = {
    "activities": [{"date": "2024-01-05", "steps": 8000, "activeEnergyBurned": 300, "activeMinutes": 40}],
}
BAD_PAYLOAD = {"activities": [{"date": "Jan 5", "steps": 8000}]}


async def _connect(
    user_id: str,
    *,
    service_name: str = "apple_health",
    is_connected: bool = True,
    auth_data: dict[str, Any] | None = None,
) -> None:
    async with test_session() as session:
        if await session.get(User, user_id) is None:
            session.add(User(id=user_id, email=f"{user_id}@example.com"))
        session.add(
            ConnectedService(
                user_id=user_id,
                service_name=service_name,
                is_connected=is_connected,
                auth_data=auth_data,
                last_synced=datetime(2024, 1, 1),
            )
        )
        await session.commit()


async def _metric_dates(user_id: str) -> list[str]:
    async with test_session() as session:
        result = await session.execute(
            select(HealthMetric.date).where(HealthMetric.user_id == user_id).order_by(HealthMetric.date)
        )
        return list(result.scalars().all())


async def _last_synced(user_id: str) -> datetime | None:
    async with test_session() as session:
        result = await session.execute(
            select(ConnectedService.last_synced).where(
                ConnectedService.user_id == user_id,
                ConnectedService.service_name == "apple_health",
            )
        )
        return result.scalar_one_or_none()


class TestRunDailyAppleHealthSync:
    async def test_syncs_opted_in_user(self) -> None:
        await _connect("u1", auth_data={"auto_sync": True, "last_sync_data": GOOD_PAYLOAD})

        result = await run_daily_apple_health_sync(test_session)

        assert result.users_synced == 1
        assert result.users_failed == 0
        assert not result.has_errors
        assert await _metric_dates("u1") == ["2024-01-05"]
        last_synced = await _last_synced("u1")
        assert last_synced is not None
        assert last_synced > datetime(2024, 1, 1)

    async def test_skips_users_without_auto_sync(self) -> None:
        await _connect("u1", auth_data={"auto_sync": False, "last_sync_data": GOOD_PAYLOAD})
        await _connect("u2", auth_data=None)
        await _connect("u3", is_connected=False, auth_data={"auto_sync": True, "last_sync_data": GOOD_PAYLOAD})
        await _connect("u4", service_name="lab_partner", auth_data={"auto_sync": True})

        result = await run_daily_apple_health_sync(test_session)

        assert result.users_synced == 0
        assert result.users_failed == 0
        for user_id in ("u1", "u2", "u3", "u4"):
            assert await _metric_dates(user_id) == []
        assert await _last_synced("u1") == datetime(2024, 1, 1)

    async def test_one_failing_user_does_not_stop_others(self) -> None:
        await _connect("u-bad", auth_data={"auto_sync": True, "last_sync_data": BAD_PAYLOAD})
        await _connect("u-good", auth_data={"auto_sync": True, "last_sync_data": GOOD_PAYLOAD})

        result = await run_daily_apple_health_sync(test_session)

        assert result.users_synced == 1
        assert result.users_failed == 1
        assert result.errors[0].startswith("u-bad:")
        assert await _metric_dates("u-good") == ["2024-01-05"]
        assert await _metric_dates("u-bad") == []
        assert await _last_synced("u-bad") == datetime(2024, 1, 1)

    async def test_missing_cached_payload_syncs_nothing(self) -> None:
        await _connect("u1", auth_data={"auto_sync": True})

        result = await run_daily_apple_health_sync(test_session)

        assert result.users_synced == 1
        assert await _metric_dates("u1") == []

    async def test_no_connected_users(self) -> None:
        result = await run_daily_apple_health_sync(test_session)
        assert result.users_synced == 0
        assert result.users_failed == 0


class TestInitScheduledTasks:
    def test_registers_daily_task(self) -> None:
        scheduler = TaskScheduler(tick_seconds=60)
        init_scheduled_tasks(scheduler, test_session, Settings(auto_sync_interval_minutes=1440))

        task = scheduler.tasks[DAILY_SYNC_TASK_ID]
        assert task.interval == 1440 * 60
        assert task.is_running is False

    async def test_registered_task_runs_sync(self) -> None:
        await _connect("u1", auth_data={"auto_sync": True, "last_sync_data": GOOD_PAYLOAD})
        now = [0.0]
        scheduler = TaskScheduler(tick_seconds=60, clock=lambda: now[0])
        init_scheduled_tasks(scheduler, test_session, Settings(auto_sync_interval_minutes=1440))

        assert scheduler.check_tasks() == []

        now[0] = 1440 * 60
        started = scheduler.check_tasks()
        assert len(started) == 1
        await asyncio.gather(*started)

        assert await _metric_dates("u1") == ["2024-01-05"]
