"""
Progress API endpoints - daily stats, progress summary and weight log.
"""

import asyncio
from datetime import date

from fastapi import APIRouter, Depends, status

from ..agents import StepSource
from ..core import ActivityLog
from ..core.stats import daily_stats, progress_summary
from ..models import DailyStats, LogAck, ProgressSummary, WeightLogCreate
from .deps import get_activity_log, get_day, get_step_source

router = APIRouter(tags=["progress"])


@router.get("/stats", response_model=DailyStats)
async def get_stats(
    day: date = Depends(get_day),
    log: ActivityLog = Depends(get_activity_log),
    step_source: StepSource = Depends(get_step_source),
):
    """
    Today's calories consumed and burned, whether a workout was done, and a
    placeholder step count.
    """
    workouts, foods = await asyncio.gather(log.list_workouts(), log.list_foods())
    return daily_stats(workouts, foods, day, steps=step_source.steps_for(log.user_id, day))


@router.get("/stats/progress", response_model=ProgressSummary)
async def get_progress(log: ActivityLog = Depends(get_activity_log)):
    """BMI, weight trend, weekly and all-time workout totals."""
    profile, weights, workouts = await asyncio.gather(
        log.get_profile(), log.list_weights(), log.list_workouts()
    )
    return progress_summary(profile, weights, workouts)


@router.post("/weight/log", response_model=LogAck, status_code=status.HTTP_201_CREATED)
async def log_weight(
    weight: WeightLogCreate,
    log: ActivityLog = Depends(get_activity_log),
):
    """Record a body weight measurement (kg)."""
    log_id = await log.log_weight(weight.model_dump(by_alias=True, exclude_none=True))
    return LogAck(log_id=log_id)


@router.get("/weight/history")
async def weight_history(log: ActivityLog = Depends(get_activity_log)):
    """All weight entries, ascending by date."""
    return {"weights": await log.list_weights()}
