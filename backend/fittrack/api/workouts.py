"""
Workout API endpoints - catalog, completed sessions and history.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..core import ActivityLog, WorkoutCatalog
from ..models import LogAck, WorkoutLogCreate
from .deps import get_activity_log, get_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("")
async def list_workouts(catalog: WorkoutCatalog = Depends(get_catalog)):
    """
    The workout library. Seeds the default catalog on first use.
    Open to anonymous callers.
    """
    return {"workouts": await catalog.list_workouts()}


@router.post("/log", response_model=LogAck, status_code=status.HTTP_201_CREATED)
async def log_workout(
    workout: WorkoutLogCreate,
    log: ActivityLog = Depends(get_activity_log),
    catalog: WorkoutCatalog = Depends(get_catalog),
):
    """
    Record a completed workout session.

    Args:
        workout: Workout id, duration (minutes), calories burned, exercise snapshot, date

    Raises:
        HTTPException: 400 if the workout id is not in the catalog
    """
    try:
        await catalog.get_workout(workout.workout_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown workout: {workout.workout_id}"
        )

    log_id = await log.log_workout(workout.model_dump(by_alias=True, exclude_none=True))
    logger.info(
        f"Workout {workout.workout_id} logged for user {log.user_id}",
        extra={"extra_fields": {"user_id": log.user_id, "log_id": log_id}}
    )
    return LogAck(log_id=log_id)


@router.get("/history")
async def workout_history(log: ActivityLog = Depends(get_activity_log)):
    """All of the user's workout entries, ascending by date."""
    return {"workouts": await log.list_workouts()}
