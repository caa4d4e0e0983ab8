"""Workout endpoints — planned and completed workouts and their strength sets."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from healthhub import storage
from healthhub.database import get_db
from healthhub.models.workout import Workout, WorkoutSet
from healthhub.schemas.connected_service import MessageResponse
from healthhub.schemas.health import DATE_PATTERN
from healthhub.schemas.workout import (
    WorkoutCreate,
    WorkoutRead,
    WorkoutSetCreate,
    WorkoutSetRead,
    WorkoutSetUpdate,
    WorkoutUpdate,
)

router = APIRouter(prefix="/api/workouts", tags=["workouts"])
sets_router = APIRouter(prefix="/api/workout-sets", tags=["workouts"])
logger = logging.getLogger(__name__)

# MVP: single user
DEFAULT_USER_ID = "1"


async def _get_workout_or_404(session: AsyncSession, workout_id: int) -> Workout:
    workout = await storage.get_workout(session, DEFAULT_USER_ID, workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


# ── Workouts ────────────────────────────────────────────────────────


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    start_date: str | None = Query(default=None, pattern=DATE_PATTERN),
    end_date: str | None = Query(default=None, pattern=DATE_PATTERN),
    session: AsyncSession = Depends(get_db),
) -> list[Workout]:
    """Get workouts in date order, optionally bounded by inclusive dates."""
    return await storage.get_workouts(session, DEFAULT_USER_ID, start_date, end_date)


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: int,
    session: AsyncSession = Depends(get_db),
) -> Workout:
    return await _get_workout_or_404(session, workout_id)


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    body: WorkoutCreate,
    session: AsyncSession = Depends(get_db),
) -> Workout:
    workout = await storage.create_workout(session, DEFAULT_USER_ID, body.model_dump())
    await session.commit()
    await session.refresh(workout)
    logger.info("Created %s workout %d for user %s", workout.activity_type, workout.id, DEFAULT_USER_ID)
    return workout


@router.put("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: int,
    body: WorkoutUpdate,
    session: AsyncSession = Depends(get_db),
) -> Workout:
    """Update a workout (partial update)."""
    workout = await storage.update_workout(
        session, DEFAULT_USER_ID, workout_id, body.model_dump(exclude_unset=True)
    )
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    await session.commit()
    await session.refresh(workout)
    return workout


@router.delete("/{workout_id}", response_model=MessageResponse)
async def delete_workout(
    workout_id: int,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a workout and all of its sets."""
    if not await storage.delete_workout(session, DEFAULT_USER_ID, workout_id):
        raise HTTPException(status_code=404, detail="Workout not found")
    await session.commit()
    return MessageResponse(message="Workout deleted successfully")


# ── Workout sets ────────────────────────────────────────────────────


@router.get("/{workout_id}/sets", response_model=list[WorkoutSetRead])
async def list_workout_sets(
    workout_id: int,
    session: AsyncSession = Depends(get_db),
) -> list[WorkoutSet]:
    workout = await _get_workout_or_404(session, workout_id)
    return await storage.get_workout_sets(session, workout.id)


@router.post("/{workout_id}/sets", response_model=list[WorkoutSetRead], status_code=201)
async def create_workout_sets(
    workout_id: int,
    body: WorkoutSetCreate | list[WorkoutSetCreate],
    session: AsyncSession = Depends(get_db),
) -> list[WorkoutSet]:
    """Add one set (an object) or several (an array) to a workout.

    Always responds with the list of created sets.
    """
    workout = await _get_workout_or_404(session, workout_id)
    entries = body if isinstance(body, list) else [body]
    sets = await storage.create_workout_sets(
        session, workout.id, [entry.model_dump() for entry in entries]
    )
    await session.commit()
    for workout_set in sets:
        await session.refresh(workout_set)
    return sets


@sets_router.put("/{set_id}", response_model=WorkoutSetRead)
async def update_workout_set(
    set_id: int,
    body: WorkoutSetUpdate,
    session: AsyncSession = Depends(get_db),
) -> WorkoutSet:
    """Update a set (partial update)."""
    workout_set = await storage.update_workout_set(
        session, DEFAULT_USER_ID, set_id, body.model_dump(exclude_unset=True)
    )
    if workout_set is None:
        raise HTTPException(status_code=404, detail="Workout set not found")
    await session.commit()
    await session.refresh(workout_set)
    return workout_set


@sets_router.delete("/{set_id}", response_model=MessageResponse)
async def delete_workout_set(
    set_id: int,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    if not await storage.delete_workout_set(session, DEFAULT_USER_ID, set_id):
        raise HTTPException(status_code=404, detail="Workout set not found")
    await session.commit()
    return MessageResponse(message="Workout set deleted successfully")
