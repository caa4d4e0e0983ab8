"""Database access for health metrics, insights, connected services, the
health-event calendar, and workouts.

Functions flush but never commit; the caller owns the transaction. Lookups by
id are scoped to the user, so another user's row reads as missing.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from healthhub.models.connected_service import ConnectedService
from healthhub.models.health import HealthMetric
from healthhub.models.health_event import HealthEvent
from healthhub.models.insight import Insight
from healthhub.models.workout import Workout, WorkoutSet
from healthhub.sources.apple_health.models import DailyMetricRecord

logger = logging.getLogger(__name__)

METRIC_FIELDS: tuple[str, ...] = (
    "source",
    "steps",
    "active_minutes",
    "calories_burned",
    "resting_heart_rate",
    "sleep_duration",
    "deep_sleep_duration",
    "light_sleep_duration",
    "weight",
    "protein",
    "carbs",
    "fats",
)


# ── Health metrics ──────────────────────────────────────────────────


async def batch_upsert_health_metrics(
    session: AsyncSession, records: Iterable[DailyMetricRecord]
) -> list[HealthMetric]:
    """Create or replace one HealthMetric row per (user_id, date).

    An existing row for the same key has every metric column overwritten by
    the incoming record, so re-applying a batch never accumulates values.
    Flushes but does not commit.
    """
    stored: list[HealthMetric] = []
    for record in records:
        result = await session.execute(
            select(HealthMetric).where(
                HealthMetric.user_id == record.user_id,
                HealthMetric.date == record.date,
            )
        )
        metric = result.scalar_one_or_none()
        if metric is None:
            metric = HealthMetric(user_id=record.user_id, date=record.date)
            session.add(metric)
        for field in METRIC_FIELDS:
            setattr(metric, field, getattr(record, field))
        stored.append(metric)

    await session.flush()
    logger.debug("Upserted %d health metric rows", len(stored))
    return stored


async def create_health_metrics(
    session: AsyncSession, user_id: str, entries: Iterable[Mapping[str, Any]]
) -> list[HealthMetric]:
    """Store manually entered days for a user.

    Goes through the same (user_id, date) upsert as imported data, so an
    entry replaces whatever is stored for its date.
    """
    records = [DailyMetricRecord(user_id=user_id, **entry) for entry in entries]
    return await batch_upsert_health_metrics(session, records)

async def get_health_metrics(
    session: AsyncSession,
    user_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[HealthMetric]:
    """Return a user's metrics in ascending date order, optionally bounded."""
    stmt = select(HealthMetric).where(HealthMetric.user_id == user_id)
    if start_date is not None:
        stmt = stmt.where(HealthMetric.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(HealthMetric.date <= end_date)
    result = await session.execute(stmt.order_by(HealthMetric.date))
    return list(result.scalars().all())


async def get_latest_health_metric(session: AsyncSession, user_id: str) -> HealthMetric | None:
    result = await session.execute(
        select(HealthMetric)
        .where(HealthMetric.user_id == user_id)
        .order_by(HealthMetric.date.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


# ── Insights ────────────────────────────────────────────────────────


async def create_insight(
    session: AsyncSession,
    user_id: str,
    content: str,
    category: str,
    severity: str = "info",
) -> Insight:
    insight = Insight(user_id=user_id, content=content, category=category, severity=severity)
    session.add(insight)
    await session.flush()
    return insight


async def get_insights(session: AsyncSession, user_id: str, limit: int = 10) -> list[Insight]:
    """Return the user's most recent insights, newest first."""
    result = await session.execute(
        select(Insight)
        .where(Insight.user_id == user_id)
        .order_by(Insight.created_at.desc(), Insight.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def mark_insight_read(session: AsyncSession, user_id: str, insight_id: int) -> bool:
    result = await session.execute(
        select(Insight).where(Insight.id == insight_id, Insight.user_id == user_id)
    )
    insight = result.scalar_one_or_none()
    if insight is None:
        return False
    insight.is_read = True
    await session.flush()
    return True

# ── Connected services ──────────────────────────────────────────────


async def get_connected_services(session: AsyncSession, user_id: str) -> list[ConnectedService]:
    result = await session.execute(
        select(ConnectedService)
        .where(ConnectedService.user_id == user_id)
        .order_by(ConnectedService.service_name)
    )
    return list(result.scalars().all())


async def get_all_connected_services(session: AsyncSession) -> list[ConnectedService]:
    result = await session.execute(select(ConnectedService).order_by(ConnectedService.id))
    return list(result.scalars().all())


async def get_connected_service(
    session: AsyncSession, user_id: str, service_name: str
) -> ConnectedService | None:
    result = await session.execute(
        select(ConnectedService).where(
            ConnectedService.user_id == user_id,
            ConnectedService.service_name == service_name,
        )
    )
    return result.scalar_one_or_none()


async def upsert_connected_service(
    session: AsyncSession,
    user_id: str,
    service_name: str,
    *,
    is_connected: bool | None = None,
    last_synced: datetime | None = None,
    auth_data: dict[str, Any] | None = None,
) -> ConnectedService:
    """Create a connected service or merge the supplied fields into it.

    Fields left as None keep their stored value.
    """
    service = await get_connected_service(session, user_id, service_name)
    if service is None:
        service = ConnectedService(user_id=user_id, service_name=service_name)
        session.add(service)

    if is_connected is not None:
        service.is_connected = is_connected
    if last_synced is not None:
        service.last_synced = last_synced
    if auth_data is not None:
        service.auth_data = auth_data
    service.updated_at = datetime.utcnow()

    await session.flush()
    return service


async def disconnect_service(session: AsyncSession, user_id: str, service_name: str) -> bool:
    """Mark a service disconnected, keeping its auth data.

    Returns:
        False if the user never connected this service.
    """
    service = await get_connected_service(session, user_id, service_name)
    if service is None:
        return False
    service.is_connected = False
    service.updated_at = datetime.utcnow()
    await session.flush()
    return True


# ── Health events ───────────────────────────────────────────────────


def _apply_changes(row: Any, changes: Mapping[str, Any]) -> None:
    for field, value in changes.items():
        setattr(row, field, value)


async def get_health_events(
    session: AsyncSession,
    user_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[HealthEvent]:
    """Return a user's events in calendar order, optionally bounded by date."""
    stmt = select(HealthEvent).where(HealthEvent.user_id == user_id)
    if start_date is not None:
        stmt = stmt.where(HealthEvent.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(HealthEvent.date <= end_date)
    result = await session.execute(stmt.order_by(HealthEvent.date, HealthEvent.time, HealthEvent.id))
    return list(result.scalars().all())


async def get_health_event(session: AsyncSession, user_id: str, event_id: int) -> HealthEvent | None:
    result = await session.execute(
        select(HealthEvent).where(HealthEvent.id == event_id, HealthEvent.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_health_event(
    session: AsyncSession, user_id: str, fields: Mapping[str, Any]
) -> HealthEvent:
    event = HealthEvent(user_id=user_id, **fields)
    session.add(event)
    await session.flush()
    return event


async def update_health_event(
    session: AsyncSession, user_id: str, event_id: int, changes: Mapping[str, Any]
) -> HealthEvent | None:
    event = await get_health_event(session, user_id, event_id)
    if event is None:
        return None
    _apply_changes(event, changes)
    await session.flush()
    return event


async def delete_health_event(session: AsyncSession, user_id: str, event_id: int) -> bool:
    event = await get_health_event(session, user_id, event_id)
    if event is None:
        return False
    await session.delete(event)
    await session.flush()
    return True


# ── Workouts ────────────────────────────────────────────────────────


async def get_workouts(
    session: AsyncSession,
    user_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[Workout]:
    stmt = select(Workout).where(Workout.user_id == user_id)
    if start_date is not None:
        stmt = stmt.where(Workout.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Workout.date <= end_date)
    result = await session.execute(stmt.order_by(Workout.date, Workout.start_time, Workout.id))
    return list(result.scalars().all())


async def get_workout(session: AsyncSession, user_id: str, workout_id: int) -> Workout | None:
    result = await session.execute(
        select(Workout).where(Workout.id == workout_id, Workout.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_workout(session: AsyncSession, user_id: str, fields: Mapping[str, Any]) -> Workout:
    workout = Workout(user_id=user_id, **fields)
    session.add(workout)
    await session.flush()
    return workout


async def update_workout(
    session: AsyncSession, user_id: str, workout_id: int, changes: Mapping[str, Any]
) -> Workout | None:
    workout = await get_workout(session, user_id, workout_id)
    if workout is None:
        return None
    _apply_changes(workout, changes)
    workout.updated_at = datetime.utcnow()
    await session.flush()
    return workout


async def delete_workout(session: AsyncSession, user_id: str, workout_id: int) -> bool:
    """Delete a workout together with all of its sets."""
    workout = await get_workout(session, user_id, workout_id)
    if workout is None:
        return False
    await session.execute(delete(WorkoutSet).where(WorkoutSet.workout_id == workout.id))
    await session.delete(workout)
    await session.flush()
    logger.debug("Deleted workout %d for user %s", workout_id, user_id)
    return True


async def get_workout_sets(session: AsyncSession, workout_id: int) -> list[WorkoutSet]:
    """Return a workout's sets ordered by set number."""
    result = await session.execute(
        select(WorkoutSet)
        .where(WorkoutSet.workout_id == workout_id)
        .order_by(WorkoutSet.set_number, WorkoutSet.id)
    )
    return list(result.scalars().all())


async def create_workout_sets(
    session: AsyncSession, workout_id: int, entries: Iterable[Mapping[str, Any]]
) -> list[WorkoutSet]:
    sets = [WorkoutSet(workout_id=workout_id, **entry) for entry in entries]
    session.add_all(sets)
    await session.flush()
    return sets


async def get_workout_set(session: AsyncSession, user_id: str, set_id: int) -> WorkoutSet | None:
    """Look up a set, visible only if its workout belongs to the user."""
    result = await session.execute(
        select(WorkoutSet)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(WorkoutSet.id == set_id, Workout.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def update_workout_set(
    session: AsyncSession, user_id: str, set_id: int, changes: Mapping[str, Any]
) -> WorkoutSet | None:
    workout_set = await get_workout_set(session, user_id, set_id)
    if workout_set is None:
        return None
    _apply_changes(workout_set, changes)
    workout_set.updated_at = datetime.utcnow()
    await session.flush()
    return workout_set


async def delete_workout_set(session: AsyncSession, user_id: str, set_id: int) -> bool:
    workout_set = await get_workout_set(session, user_id, set_id)
    if workout_set is None:
        return False
    await session.delete(workout_set)
    await session.flush()
    return True
