"""
Derived Stats Engine.

Pure functions that reduce the append-only logs to the numbers shown on the
dashboard and progress views. Nothing is cached or persisted: callers scan the
logs and call these on every request, so results always reflect the latest
writes.

Numeric fields are read leniently (see :func:`to_number`); a malformed entry
contributes 0 instead of failing the whole aggregate.
"""

import math
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..models import (
    DailyStats, MacroTotals, MealBreakdown, MealGroup, ProgressSummary, WeightTrend,
    parse_iso_date
)

MEALS = ("breakfast", "lunch", "dinner", "snacks")

# Upper bounds of the BMI bands; the last band is open-ended
BMI_BANDS = (
    (18.5, "underweight"),
    (25.0, "normal"),
    (30.0, "overweight"),
    (math.inf, "obese"),
)

WEEK = timedelta(days=7)


def to_number(value: Any) -> float:
    """Read a numeric field; missing, non-numeric, boolean or non-finite values count as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an entry's ISO-8601 ``date``/``timestamp`` into an aware datetime.

    Date-only strings mean midnight, naive datetimes are taken as UTC, and
    anything unparseable yields None.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = parse_iso_date(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_by_date(entries: Iterable[Dict[str, Any]], field: str = "date") -> List[Dict[str, Any]]:
    """Stable ascending sort by a timestamp field; unparseable dates go first."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(entries, key=lambda e: parse_timestamp(e.get(field)) or oldest)


def entries_on_day(entries: Iterable[Dict[str, Any]], day: date) -> List[Dict[str, Any]]:
    """Entries whose ``date`` string starts with the calendar-day prefix of ``day``."""
    prefix = day.isoformat()
    return [e for e in entries if str(e.get("date") or "").startswith(prefix)]


def sum_field(entries: Iterable[Dict[str, Any]], field: str) -> float:
    return sum((to_number(e.get(field)) for e in entries), 0)


def daily_stats(
    workouts: List[Dict[str, Any]],
    foods: List[Dict[str, Any]],
    day: date,
    steps: int = 0,
) -> DailyStats:
    """
    Same-day aggregates.

    Args:
        workouts: The user's workout log (any days)
        foods: The user's food log (any days)
        day: The calendar day to aggregate, in the client's local time
        steps: Placeholder step count supplied by a ``StepSource``
    """
    todays_workouts = entries_on_day(workouts, day)
    todays_foods = entries_on_day(foods, day)

    return DailyStats(
        calories_consumed=sum_field(todays_foods, "calories"),
        calories_burned=sum_field(todays_workouts, "caloriesBurned"),
        workout_completed=len(todays_workouts) > 0,
        steps=steps,
    )


def calculate_bmi(height_cm: Any, weight_kg: Any) -> Optional[float]:
    """BMI rounded to one decimal, or None when height or weight is missing or not positive."""
    height = to_number(height_cm)
    weight = to_number(weight_kg)
    if height <= 0 or weight <= 0:
        return None

    height_m = height / 100
    return round(weight / (height_m * height_m), 1)


def classify_bmi(bmi: Optional[float]) -> Optional[str]:
    """Map a BMI to underweight / normal / overweight / obese."""
    if bmi is None:
        return None
    for upper, label in BMI_BANDS:
        if bmi < upper:
            return label
    return BMI_BANDS[-1][1]


def weight_trend(weights: List[Dict[str, Any]]) -> WeightTrend:
    """
    Compare the first and last weight entries by ascending date.

    With fewer than two entries there is nothing to compare and the trend is stable.
    """
    if len(weights) < 2:
        return WeightTrend(change=0, trend="stable")

    ordered = sort_by_date(weights)
    first = to_number(ordered[0].get("weight"))
    last = to_number(ordered[-1].get("weight"))
    delta = last - first

    if delta < 0:
        trend = "down"
    elif delta > 0:
        trend = "up"
    else:
        trend = "stable"
    return WeightTrend(change=round(abs(delta), 1), trend=trend)


def weekly_workout_count(workouts: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> int:
    """Number of workouts dated at or after ``now - 7 days``."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    since = now - WEEK
    count = 0
    for entry in workouts:
        logged_at = parse_timestamp(entry.get("date"))
        if logged_at is not None and logged_at >= since:
            count += 1
    return count


def total_calories_burned(workouts: Iterable[Dict[str, Any]]) -> float:
    """All-time sum of ``caloriesBurned``."""
    return sum_field(workouts, "caloriesBurned")


def group_meals(foods: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Partition food entries by ``meal``.

    The four standard meals are always present (possibly empty); entries with
    any other meal value get a group of their own after them.
    """
    groups: Dict[str, List[Dict[str, Any]]] = OrderedDict((meal, []) for meal in MEALS)
    for entry in foods:
        groups.setdefault(str(entry.get("meal") or ""), []).append(entry)
    return groups


def meal_calories(foods: Iterable[Dict[str, Any]], meal: str) -> float:
    """Calorie subtotal of one meal; 0 when the meal has no entries."""
    return sum_field((f for f in foods if f.get("meal") == meal), "calories")


def macro_totals(foods: Iterable[Dict[str, Any]]) -> MacroTotals:
    foods = list(foods)
    return MacroTotals(
        calories=sum_field(foods, "calories"),
        protein=sum_field(foods, "protein"),
        carbs=sum_field(foods, "carbs"),
        fats=sum_field(foods, "fats"),
    )


def meal_breakdown(
    foods: List[Dict[str, Any]],
    day: date,
    calorie_goal: Optional[float] = None,
) -> MealBreakdown:
    """
    The day's food entries grouped by meal with subtotals and macro totals.

    With a ``calorie_goal`` the result also carries the calories left for the
    day; the remainder goes negative once the goal is exceeded.
    """
    todays_foods = entries_on_day(foods, day)
    meals = {
        meal: MealGroup(entries=entries, calories=sum_field(entries, "calories"))
        for meal, entries in group_meals(todays_foods).items()
    }
    totals = macro_totals(todays_foods)
    remaining = None
    if calorie_goal is not None:
        remaining = round(calorie_goal - totals.calories, 1)
    return MealBreakdown(
        date=day.isoformat(),
        meals=meals,
        totals=totals,
        calorie_goal=calorie_goal,
        calories_remaining=remaining,
    )


def progress_summary(
    profile: Optional[Dict[str, Any]],
    weights: List[Dict[str, Any]],
    workouts: List[Dict[str, Any]],
    now: Optional[datetime] = None,
) -> ProgressSummary:
    """
    Historical aggregates for the progress view.

    BMI uses the profile height and weight as recorded on the profile; the
    current weight prefers the latest weight log entry over the profile value.
    """
    profile = profile or {}
    bmi = calculate_bmi(profile.get("height"), profile.get("weight"))
    trend = weight_trend(weights)

    current_weight = None
    if weights:
        current_weight = to_number(sort_by_date(weights)[-1].get("weight")) or None
    if current_weight is None and to_number(profile.get("weight")) > 0:
        current_weight = to_number(profile.get("weight"))

    return ProgressSummary(
        bmi=bmi,
        bmi_category=classify_bmi(bmi),
        current_weight=current_weight,
        weight_change=trend.change,
        weight_trend=trend.trend,
        weekly_workouts=weekly_workout_count(workouts, now),
        total_workouts=len(workouts),
        total_calories_burned=total_calories_burned(workouts),
    )
