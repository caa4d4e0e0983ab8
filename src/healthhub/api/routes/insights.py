"""Insight feed endpoints — listing and read tracking."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from healthhub import storage
from healthhub.database import get_db
from healthhub.models.insight import Insight
from healthhub.schemas.connected_service import MessageResponse
from healthhub.schemas.insight import InsightRead

router = APIRouter(prefix="/api/insights", tags=["insights"])

# MVP: single user
DEFAULT_USER_ID = "1"


@router.get("", response_model=list[InsightRead])
async def list_insights(
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_db),
) -> list[Insight]:
    """Get the most recent insights, newest first."""
    return await storage.get_insights(session, DEFAULT_USER_ID, limit)


@router.post("/{insight_id}/read", response_model=MessageResponse)
async def mark_insight_read(
    insight_id: int,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    if not await storage.mark_insight_read(session, DEFAULT_USER_ID, insight_id):
        raise HTTPException(status_code=404, detail="Insight not found")
    await session.commit()
    return MessageResponse(message="Insight marked as read")
