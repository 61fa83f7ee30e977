"""
Food API endpoints - food log, meal breakdown and image analysis.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..agents import FoodClassifier
from ..core import ActivityLog
from ..core.stats import meal_breakdown
from ..models import FoodAnalysis, FoodAnalysisRequest, FoodLogCreate, LogAck, MealBreakdown
from ..config import Settings
from .deps import get_activity_log, get_day, get_food_classifier, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/food", tags=["food"])


@router.post("/log", response_model=LogAck, status_code=status.HTTP_201_CREATED)
async def log_food(
    food: FoodLogCreate,
    log: ActivityLog = Depends(get_activity_log),
):
    """Record a food entry (typed in, or confirmed from an image analysis)."""
    log_id = await log.log_food(food.model_dump(by_alias=True, exclude_none=True))
    return LogAck(log_id=log_id)


@router.get("/history")
async def food_history(
    day: Optional[date] = Query(None, alias="date", description="Only entries of this day (YYYY-MM-DD)"),
    log: ActivityLog = Depends(get_activity_log),
):
    """The user's food entries, optionally restricted to one day."""
    foods = await log.list_foods(day.isoformat() if day else None)
    return {"foods": foods}


@router.get("/meals", response_model=MealBreakdown)
async def meals(
    day: date = Depends(get_day),
    log: ActivityLog = Depends(get_activity_log),
    settings: Settings = Depends(get_settings),
):
    """
    The day's food entries grouped by meal, with per-meal calories and macro totals.

    Calories left are measured against the profile's ``dailyCalorieGoal``, or the
    configured default when the profile sets none.
    """
    profile = await log.get_profile() or {}
    goal = profile.get("dailyCalorieGoal")
    if goal is None:
        goal = settings.default_calorie_goal
    return meal_breakdown(await log.list_foods(day.isoformat()), day, calorie_goal=goal)


@router.post("/analyze", response_model=FoodAnalysis)
async def analyze_food(
    request: FoodAnalysisRequest,
    log: ActivityLog = Depends(get_activity_log),
    classifier: FoodClassifier = Depends(get_food_classifier),
):
    """
    Recognise the food in an image.

    The result is not logged; the client confirms it through ``POST /food/log``.
    """
    analysis = classifier.classify(request.image_url)
    logger.info(
        f"Food analysis for user {log.user_id}: "
        f"{analysis.food.name if analysis.food else 'nothing detected'}"
    )
    return analysis
