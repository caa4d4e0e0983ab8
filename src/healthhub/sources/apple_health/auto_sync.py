"""Daily Apple Health auto-sync for users who opted in.

There is no server-side HealthKit API, so the job replays each user's most
recently uploaded payload (cached in the connected service's auth data)
through the regular validate, reduce and persist pipeline.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from healthhub import storage
from healthhub.config import Settings
from healthhub.scheduler import TaskScheduler
from healthhub.sources.apple_health.pipeline import process_apple_health_data
from healthhub.sources.apple_health.reducer import APPLE_HEALTH_SOURCE
from healthhub.sources.apple_health.validation import validate_apple_health_data

logger = logging.getLogger(__name__)

DAILY_SYNC_TASK_ID = "daily-apple-health-sync"
AUTO_SYNC_KEY = "auto_sync"
LAST_SYNC_DATA_KEY = "last_sync_data"


@dataclass
class AutoSyncResult:
    """Outcome of one auto-sync pass over all opted-in users."""

    users_synced: int = 0
    users_failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


async def _sync_user(session: AsyncSession, user_id: str, payload: object) -> None:
    data = validate_apple_health_data(payload)
    await process_apple_health_data(session, user_id, data)
    await storage.upsert_connected_service(
        session,
        user_id,
        APPLE_HEALTH_SOURCE,
        is_connected=True,
        last_synced=datetime.utcnow(),
    )
    await session.commit()


async def run_daily_apple_health_sync(
    session_factory: async_sessionmaker[AsyncSession],
) -> AutoSyncResult:
    """Re-run the Apple Health pipeline for every auto-sync user.

    Each user is processed in a fresh session; a failure for one user is
    logged and counted, and the remaining users are still processed.
    """
    result = AutoSyncResult()

    async with session_factory() as session:
        services = await storage.get_all_connected_services(session)
        due = [
            (service.user_id, dict(service.auth_data or {}))
            for service in services
            if service.service_name == APPLE_HEALTH_SOURCE and service.is_connected
        ]

    logger.info("Found %d users with Apple Health connected", len(due))

    for user_id, auth_data in due:
        if not auth_data.get(AUTO_SYNC_KEY):
            continue

        logger.info("Running auto-sync for user %s", user_id)
        try:
            async with session_factory() as session:
                await _sync_user(session, user_id, auth_data.get(LAST_SYNC_DATA_KEY) or {})
        except Exception as e:
            result.users_failed += 1
            result.errors.append(f"{user_id}: {e}")
            logger.exception("Error syncing Apple Health data for user %s", user_id)
            continue
        result.users_synced += 1
        logger.info("Auto-sync completed for user %s", user_id)

    logger.info(
        "Daily Apple Health sync completed: %d synced, %d failed",
        result.users_synced,
        result.users_failed,
    )
    return result


def init_scheduled_tasks(
    scheduler: TaskScheduler,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> None:
    """Register the background jobs this service runs."""

    async def daily_apple_health_sync() -> None:
        await run_daily_apple_health_sync(session_factory)

    scheduler.schedule_task(
        DAILY_SYNC_TASK_ID, settings.auto_sync_interval_minutes, daily_apple_health_sync
    )
