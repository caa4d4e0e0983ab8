"""Connected service endpoints — connect, disconnect, and Apple Health sync."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from healthhub import storage
from healthhub.database import get_db
from healthhub.models.connected_service import ConnectedService
from healthhub.schemas.connected_service import (
    AppleHealthSyncRequest,
    AppleHealthSyncResponse,
    ConnectedServiceRead,
    ConnectServiceRequest,
    MessageResponse,
)
from healthhub.sources.apple_health.auto_sync import LAST_SYNC_DATA_KEY
from healthhub.sources.apple_health.pipeline import process_apple_health_data
from healthhub.sources.apple_health.reducer import APPLE_HEALTH_SOURCE
from healthhub.sources.apple_health.validation import validate_apple_health_data

router = APIRouter(prefix="/api/connected-services", tags=["connected-services"])
logger = logging.getLogger(__name__)

# MVP: single user
DEFAULT_USER_ID = "1"


@router.get("", response_model=list[ConnectedServiceRead])
async def list_connected_services(
    session: AsyncSession = Depends(get_db),
) -> list[ConnectedService]:
    return await storage.get_connected_services(session, DEFAULT_USER_ID)


@router.post("/apple_health/sync", response_model=AppleHealthSyncResponse)
async def sync_apple_health(
    body: AppleHealthSyncRequest,
    session: AsyncSession = Depends(get_db),
) -> AppleHealthSyncResponse:
    """Import an Apple Health export payload.

    Validates the payload, merges it into one metric row per day, records a
    sync insight, and caches the raw payload so the daily auto-sync can
    replay it.
    """
    if body.data is None:
        raise HTTPException(status_code=400, detail="No Apple Health data provided")

    try:
        data = validate_apple_health_data(body.data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    try:
        result = await process_apple_health_data(session, DEFAULT_USER_ID, data)
    except RuntimeError as e:
        raise HTTPException(status_code=502, detail=str(e)) from None

    service = await storage.get_connected_service(session, DEFAULT_USER_ID, APPLE_HEALTH_SOURCE)
    auth_data = dict(service.auth_data or {}) if service else {}
    auth_data[LAST_SYNC_DATA_KEY] = body.data
    await storage.upsert_connected_service(
        session, DEFAULT_USER_ID, APPLE_HEALTH_SOURCE, auth_data=auth_data
    )
    await session.commit()

    return AppleHealthSyncResponse(
        metrics_added=result.metrics_added,
        days_processed=result.days_processed,
        summary=result.summary,
    )


@router.post("/{service_name}/connect", response_model=ConnectedServiceRead)
async def connect_service(
    service_name: str,
    body: ConnectServiceRequest,
    session: AsyncSession = Depends(get_db),
) -> ConnectedService:
    """Connect a service, storing its auth/settings blob.

    For apple_health, ``{"auto_sync": true}`` in auth_data opts the user into
    the daily auto-sync.
    """
    service = await storage.upsert_connected_service(
        session,
        DEFAULT_USER_ID,
        service_name,
        is_connected=True,
        last_synced=datetime.utcnow(),
        auth_data=body.auth_data,
    )
    await session.commit()
    logger.info("Connected %s for user %s", service_name, DEFAULT_USER_ID)
    return service


@router.post("/{service_name}/disconnect", response_model=MessageResponse)
async def disconnect_service(
    service_name: str,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    if not await storage.disconnect_service(session, DEFAULT_USER_ID, service_name):
        raise HTTPException(status_code=404, detail="Service not found")
    await session.commit()
    return MessageResponse(message=f"{service_name} disconnected successfully")
