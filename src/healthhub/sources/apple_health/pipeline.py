"""Apple Health import pipeline: reduce, persist, and record the sync."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from healthhub import storage
from healthhub.sources.apple_health.errors import PersistenceError
from healthhub.sources.apple_health.models import AppleHealthData
from healthhub.sources.apple_health.reducer import APPLE_HEALTH_SOURCE, reduce_daily_metrics

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of processing one Apple Health payload."""

    metrics_added: int
    days_processed: int
    summary: str


async def process_apple_health_data(
    session: AsyncSession, user_id: str, data: AppleHealthData
) -> SyncResult:
    """Reduce a validated payload to daily records and store them.

    Steps run in order and stop at the first failure:
    1. Batch-upsert the per-day records.
    2. Record a success insight noting how many days were synced.
    3. Mark the apple_health connected service as synced now.
    The session is committed once all three have succeeded.

    Raises:
        PersistenceError: The batch upsert failed. The session is rolled back
            and no insight or sync timestamp is written.
    """
    records = reduce_daily_metrics(user_id, data)

    if records:
        try:
            await storage.batch_upsert_health_metrics(session, records)
        except Exception as e:
            await session.rollback()
            logger.error("Storing %d Apple Health days failed for user %s: %s", len(records), user_id, e)
            raise PersistenceError(f"Failed to store Apple Health data: {e}") from e

    days = len(records)
    summary = (
        f"Synced data from Apple Health: {days} days of data processed. "
        "Including steps, activity, sleep, weight, heart rate, and nutrition data."
    )

    await storage.create_insight(
        session,
        user_id,
        content=(
            f"Your Apple Health data has been successfully synced. {days} days of health "
            "data are now available in your dashboard."
        ),
        category="activity",
        severity="success",
    )
    await storage.upsert_connected_service(
        session,
        user_id,
        APPLE_HEALTH_SOURCE,
        is_connected=True,
        last_synced=datetime.utcnow(),
    )
    await session.commit()

    logger.info("Apple Health sync for user %s stored %d days", user_id, days)
    return SyncResult(metrics_added=days, days_processed=days, summary=summary)
