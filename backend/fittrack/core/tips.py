"""
Daily tips shown on the dashboard, rotated by day of month.
"""

from datetime import date
from typing import Optional

DAILY_TIPS = (
    "💧 Stay hydrated! Aim for 8 glasses of water today.",
    "🏃 Even 10 minutes of movement counts!",
    "🥗 Fill half your plate with vegetables.",
    "😴 Quality sleep is crucial for recovery.",
    "💪 Consistency beats perfection every time.",
    "🧘 Don't forget to stretch after workouts.",
)


def daily_tip(day: Optional[date] = None) -> str:
    """The tip for ``day`` (today by default); every user sees the same tip on a given day."""
    day = day or date.today()
    return DAILY_TIPS[day.day % len(DAILY_TIPS)]
