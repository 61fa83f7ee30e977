"""Core module - per-user logs, derived stats and the workout catalog."""

from .activity_log import ActivityLog
from .catalog import WorkoutCatalog

__all__ = ['ActivityLog', 'WorkoutCatalog']
