"""API module."""

from .auth import router as auth_router
from .profile import router as profile_router
from .workouts import router as workouts_router
from .food import router as food_router
from .coach import router as coach_router
from .progress import router as progress_router
from .posture import router as posture_router

__all__ = [
    'auth_router',
    'profile_router',
    'workouts_router',
    'food_router',
    'coach_router',
    'progress_router',
    'posture_router',
]
