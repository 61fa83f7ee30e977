"""
Stats Models - derived aggregates returned by the stats endpoints.
"""

from typing import Any, Dict, List, Literal, Optional

from .base import CamelModel

Trend = Literal["up", "down", "stable"]


class DailyStats(CamelModel):
    """Same-day aggregates. ``steps`` is a placeholder, not a measurement."""
    calories_consumed: float
    calories_burned: float
    workout_completed: bool
    steps: int


class WeightTrend(CamelModel):
    """First-vs-last comparison over the weight history."""
    change: float
    trend: Trend


class MacroTotals(CamelModel):
    """Summed nutrition over a set of food entries."""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0


class MealGroup(CamelModel):
    """Food entries of one meal and their calorie subtotal."""
    entries: List[Dict[str, Any]]
    calories: float


class MealBreakdown(CamelModel):
    """A day's food log partitioned by meal."""
    date: str
    meals: Dict[str, MealGroup]
    totals: MacroTotals
    calorie_goal: Optional[float] = None
    calories_remaining: Optional[float] = None  # negative once over the goal


class ProgressSummary(CamelModel):
    """Historical aggregates for the progress view."""
    bmi: Optional[float] = None
    bmi_category: Optional[str] = None
    current_weight: Optional[float] = None
    weight_change: float = 0
    weight_trend: Trend = "stable"
    weekly_workouts: int = 0
    total_workouts: int = 0
    total_calories_burned: float = 0
