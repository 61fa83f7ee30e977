"""
Workout Catalog - the default workout library and its one-time seeding.
"""

import asyncio
import logging
from typing import Any, Dict, List

from ..models import WorkoutDefinition
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)

CATALOG_KEY = "workouts:library"

DEFAULT_WORKOUTS: List[WorkoutDefinition] = [
    WorkoutDefinition(
        id="1",
        name="Full Body Strength",
        category="Home",
        duration=30,
        difficulty="Beginner",
        calories_estimate=250,
        exercises=[
            {"name": "Push-ups", "reps": 10, "sets": 3},
            {"name": "Squats", "reps": 15, "sets": 3},
            {"name": "Plank", "duration": 30, "sets": 3},
            {"name": "Lunges", "reps": 10, "sets": 3},
        ],
    ),
    WorkoutDefinition(
        id="2",
        name="Cardio Blast",
        category="Cardio",
        duration=20,
        difficulty="Intermediate",
        calories_estimate=300,
        exercises=[
            {"name": "Jumping Jacks", "duration": 60, "sets": 3},
            {"name": "High Knees", "duration": 45, "sets": 3},
            {"name": "Burpees", "reps": 10, "sets": 3},
            {"name": "Mountain Climbers", "duration": 45, "sets": 3},
        ],
    ),
    WorkoutDefinition(
        id="3",
        name="Upper Body Focus",
        category="Gym",
        duration=45,
        difficulty="Advanced",
        calories_estimate=350,
        exercises=[
            {"name": "Bench Press", "reps": 12, "sets": 4},
            {"name": "Pull-ups", "reps": 8, "sets": 4},
            {"name": "Shoulder Press", "reps": 10, "sets": 3},
            {"name": "Bicep Curls", "reps": 12, "sets": 3},
        ],
    ),
]


def default_catalog() -> List[Dict[str, Any]]:
    """The default workouts in their stored (camelCase) shape."""
    return [w.model_dump(by_alias=True, exclude_none=True) for w in DEFAULT_WORKOUTS]


class WorkoutCatalog:
    """
    Read access to the shared workout library.

    The library is written once, the first time it is read while absent or
    empty; afterwards it is read-only. A lock serializes the check-and-seed so
    concurrent first reads within one process seed a single copy.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._seed_lock = asyncio.Lock()

    async def list_workouts(self) -> List[Dict[str, Any]]:
        workouts = await self.store.get(CATALOG_KEY)
        if workouts:
            return workouts

        async with self._seed_lock:
            workouts = await self.store.get(CATALOG_KEY)
            if not workouts:
                workouts = default_catalog()
                await self.store.set(CATALOG_KEY, workouts)
                logger.info(f"Seeded workout catalog with {len(workouts)} workouts")
        return workouts

    async def get_workout(self, workout_id: str) -> Dict[str, Any]:
        """
        Look up one catalog workout.

        Raises:
            KeyError: If no workout has this id
        """
        for workout in await self.list_workouts():
            if workout.get("id") == workout_id:
                return workout
        raise KeyError(workout_id)
