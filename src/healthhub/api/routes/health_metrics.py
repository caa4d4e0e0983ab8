"""Daily health metric endpoints — range listing, latest day, and manual entry."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from healthhub import storage
from healthhub.database import get_db
from healthhub.models.health import HealthMetric
from healthhub.schemas.health import (
    DATE_PATTERN,
    HealthMetricBatchRequest,
    HealthMetricCreate,
    HealthMetricRead,
)

router = APIRouter(prefix="/api/health-metrics", tags=["health-metrics"])

# MVP: single user
DEFAULT_USER_ID = "1"


@router.get("", response_model=list[HealthMetricRead])
async def list_health_metrics(
    start_date: str | None = Query(default=None, pattern=DATE_PATTERN),
    end_date: str | None = Query(default=None, pattern=DATE_PATTERN),
    session: AsyncSession = Depends(get_db),
) -> list[HealthMetric]:
    """Get daily metrics, oldest first, optionally bounded by inclusive dates."""
    return await storage.get_health_metrics(session, DEFAULT_USER_ID, start_date, end_date)


@router.get("/latest", response_model=HealthMetricRead | None)
async def get_latest_health_metric(
    session: AsyncSession = Depends(get_db),
) -> HealthMetric | None:
    """Get the most recent day of metrics, or null when none exist."""
    return await storage.get_latest_health_metric(session, DEFAULT_USER_ID)


@router.post("", response_model=HealthMetricRead, status_code=201)
async def create_health_metric(
    body: HealthMetricCreate,
    session: AsyncSession = Depends(get_db),
) -> HealthMetric:
    """Record one day of metrics by hand. Replaces any stored row for that date."""
    (metric,) = await storage.create_health_metrics(session, DEFAULT_USER_ID, [body.model_dump()])
    await session.commit()
    await session.refresh(metric)
    return metric


@router.post("/batch", response_model=list[HealthMetricRead], status_code=201)
async def create_health_metrics_batch(
    body: HealthMetricBatchRequest,
    session: AsyncSession = Depends(get_db),
) -> list[HealthMetric]:
    """Record several days at once; all entries are stored or none are."""
    if not isinstance(body.metrics, list):
        raise HTTPException(status_code=400, detail="Invalid metrics data. Expected an array.")

    try:
        entries = [HealthMetricCreate.model_validate(item) for item in body.metrics]
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from None

    metrics = await storage.create_health_metrics(
        session, DEFAULT_USER_ID, [entry.model_dump() for entry in entries]
    )
    await session.commit()
    for metric in metrics:
        await session.refresh(metric)
    return metrics
