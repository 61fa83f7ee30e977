"""
Placeholder step counter until a device integration exists.
"""

import random
from datetime import date
from typing import Optional

from .base import StepSource


class RandomStepSource(StepSource):
    """
    Random step count in ``[minimum, maximum)``.
    The value is not meaningful and changes on every call.
    """

    def __init__(self, minimum: int = 3000, maximum: int = 8000,
                 rng: Optional[random.Random] = None):
        if maximum <= minimum:
            raise ValueError("maximum must be greater than minimum")
        self.minimum = minimum
        self.maximum = maximum
        self.rng = rng or random.Random()

    def steps_for(self, user_id: str, day: date) -> int:
        return self.rng.randrange(self.minimum, self.maximum)
