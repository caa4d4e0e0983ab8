"""Health event calendar endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from healthhub import storage
from healthhub.database import get_db
from healthhub.models.health_event import HealthEvent
from healthhub.schemas.connected_service import MessageResponse
from healthhub.schemas.health import DATE_PATTERN
from healthhub.schemas.health_event import HealthEventCreate, HealthEventRead, HealthEventUpdate

router = APIRouter(prefix="/api/health-events", tags=["health-events"])

# MVP: single user
DEFAULT_USER_ID = "1"


@router.get("", response_model=list[HealthEventRead])
async def list_health_events(
    start_date: str | None = Query(default=None, pattern=DATE_PATTERN),
    end_date: str | None = Query(default=None, pattern=DATE_PATTERN),
    session: AsyncSession = Depends(get_db),
) -> list[HealthEvent]:
    """Get events in calendar order, optionally bounded by inclusive dates."""
    return await storage.get_health_events(session, DEFAULT_USER_ID, start_date, end_date)


@router.post("", response_model=HealthEventRead, status_code=201)
async def create_health_event(
    body: HealthEventCreate,
    session: AsyncSession = Depends(get_db),
) -> HealthEvent:
    event = await storage.create_health_event(session, DEFAULT_USER_ID, body.model_dump())
    await session.commit()
    await session.refresh(event)
    return event


@router.put("/{event_id}", response_model=HealthEventRead)
async def update_health_event(
    event_id: int,
    body: HealthEventUpdate,
    session: AsyncSession = Depends(get_db),
) -> HealthEvent:
    """Update an event (partial update)."""
    event = await storage.update_health_event(
        session, DEFAULT_USER_ID, event_id, body.model_dump(exclude_unset=True)
    )
    if event is None:
        raise HTTPException(status_code=404, detail="Health event not found")
    await session.commit()
    await session.refresh(event)
    return event


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_health_event(
    event_id: int,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    if not await storage.delete_health_event(session, DEFAULT_USER_ID, event_id):
        raise HTTPException(status_code=404, detail="Health event not found")
    await session.commit()
    return MessageResponse(message="Health event deleted successfully")
