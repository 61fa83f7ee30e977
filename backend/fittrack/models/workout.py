"""
Workout Catalog Models.
"""

from typing import List, Literal, Optional
from pydantic import Field

from .base import CamelModel

Category = Literal["Home", "Gym", "Cardio"]
Difficulty = Literal["Beginner", "Intermediate", "Advanced"]


class Exercise(CamelModel):
    """One step of a workout. Either reps or duration (seconds) is set."""
    name: str
    reps: Optional[int] = Field(None, ge=0)
    sets: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)


class WorkoutDefinition(CamelModel):
    """A catalog workout shared by every user."""
    id: str
    name: str
    category: Category
    duration: int  # minutes
    difficulty: Difficulty
    calories_estimate: int
    exercises: List[Exercise]
