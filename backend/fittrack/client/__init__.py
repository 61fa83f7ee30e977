"""
Client-side pieces: session state, the HTTP API client and the workout player.
"""

from .api_client import ApiError, FitTrackClient
from .session import SessionState
from .workout_player import PlayerState, WorkoutPlayer, WorkoutSessionError

__all__ = [
    "ApiError",
    "FitTrackClient",
    "PlayerState",
    "SessionState",
    "WorkoutPlayer",
    "WorkoutSessionError",
]
