"""
Workout Player - steps through one workout's exercises and logs the session on completion.
"""

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# Receives the workout log payload; usually FitTrackClient.log_workout
WorkoutSink = Callable[[Dict[str, Any]], Awaitable[Any]]


class PlayerState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class WorkoutSessionError(Exception):
    """Raised for an operation the current player state does not allow."""


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class WorkoutPlayer:
    """
    Single-session state machine: ``idle -> in_progress -> completed``.

    Only one session runs at a time. Starting a second one while the first is
    in progress raises :class:`WorkoutSessionError`; call :meth:`abandon`
    first to drop it. Abandoning writes no log entry.
    """

    def __init__(self, sink: WorkoutSink, clock: Callable[[], int] = _wall_clock_ms):
        """
        Args:
            sink: Async callable that persists the finished session's log payload
            clock: Milliseconds since the epoch
        """
        self._sink = sink
        self._clock = clock
        self.state = PlayerState.IDLE
        self.workout: Optional[Dict[str, Any]] = None
        self.index = 0
        self.started_at_ms: Optional[int] = None
        self.last_entry: Optional[Dict[str, Any]] = None
        self._finishing = False

    @property
    def exercises(self) -> List[Dict[str, Any]]:
        return list((self.workout or {}).get("exercises") or [])

    @property
    def current_exercise(self) -> Optional[Dict[str, Any]]:
        if self.state is not PlayerState.IN_PROGRESS or not self.exercises:
            return None
        return self.exercises[self.index]

    @property
    def is_last_exercise(self) -> bool:
        return self.index >= len(self.exercises) - 1

    def start(self, workout: Dict[str, Any]) -> None:
        """
        Begin ``workout`` (a catalog definition) at its first exercise.

        Raises:
            WorkoutSessionError: A session is already in progress
        """
        if self.state is PlayerState.IN_PROGRESS:
            raise WorkoutSessionError(
                f"Workout {self.workout.get('id')} is still in progress"
            )

        self.workout = workout
        self.index = 0
        self.started_at_ms = self._clock()
        self.last_entry = None
        self.state = PlayerState.IN_PROGRESS
        logger.info(f"Started workout {workout.get('id')} ({len(self.exercises)} exercises)")

    async def advance(self) -> Optional[Dict[str, Any]]:
        """
        Move to the next exercise, or finish the session from the last one.

        Returns:
            The logged payload when the session completed, otherwise None

        Raises:
            WorkoutSessionError: No session is in progress, or it is already
                being completed by an earlier call
        """
        if self.state is not PlayerState.IN_PROGRESS:
            raise WorkoutSessionError("No workout in progress")
        if self._finishing:
            raise WorkoutSessionError("Workout is already being completed")

        if not self.is_last_exercise:
            self.index += 1
            return None
        return await self._finish()

    def abandon(self) -> None:
        """
        Discard the running session without logging it.

        Raises:
            WorkoutSessionError: The session is being completed
        """
        if self._finishing:
            raise WorkoutSessionError("Workout is already being completed")
        if self.state is PlayerState.IN_PROGRESS:
            logger.info(f"Abandoned workout {self.workout.get('id')} at exercise {self.index}")
        self.state = PlayerState.IDLE
        self.workout = None
        self.index = 0
        self.started_at_ms = None

    async def _finish(self) -> Dict[str, Any]:
        now_ms = self._clock()
        entry = {
            "workoutId": self.workout.get("id"),
            "duration": (now_ms - self.started_at_ms) // 60000,
            "caloriesBurned": self.workout.get("caloriesEstimate", 0),
            "exercises": self.exercises,
            "date": datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc).isoformat(),
        }

        # State only moves to completed once the sink has accepted the entry
        self._finishing = True
        try:
            await self._sink(entry)
        finally:
            self._finishing = False

        self.state = PlayerState.COMPLETED
        self.last_entry = entry
        logger.info(f"Completed workout {entry['workoutId']} in {entry['duration']} min")
        return entry
