"""
Activity Log Models - workout, food and weight log requests.
Stored entries are plain dicts in the camelCase shape of these models.
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import Field, field_validator

from .base import CamelModel
from .workout import Exercise

Meal = Literal["breakfast", "lunch", "dinner", "snacks"]


def parse_iso_date(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime, accepting a trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class LogCreate(CamelModel):
    """Fields shared by every log request."""
    date: Optional[str] = None  # ISO-8601; filled in by the server when absent

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            parse_iso_date(value)
        except ValueError:
            raise ValueError("date must be an ISO-8601 date or datetime")
        return value


class WorkoutLogCreate(LogCreate):
    """A completed workout session."""
    workout_id: str
    duration: int = Field(0, ge=0)  # minutes
    calories_burned: float = Field(0, ge=0)
    exercises: List[Exercise] = Field(default_factory=list)


class FoodLogCreate(LogCreate):
    """A food entry, typed in or confirmed from an image analysis."""
    food_name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fats: float = Field(0, ge=0)
    meal: Meal = "breakfast"
    image_url: Optional[str] = None

    @field_validator("food_name")
    @classmethod
    def strip_food_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("foodName must not be blank")
        return value


class WeightLogCreate(LogCreate):
    """A body weight measurement in kg."""
    weight: float = Field(..., gt=0, le=1000)


class LogAck(CamelModel):
    """Acknowledgement of an appended log entry."""
    success: bool = True
    log_id: str
