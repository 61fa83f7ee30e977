"""
Mock posture check - canned form feedback picked at random.
"""

import random
from typing import List, Optional

from ..models import PostureResult
from .base import PostureAnalyzer

MOCK_RESULTS: List[PostureResult] = [
    PostureResult(
        score="Good",
        mistakes=["Keep your core engaged", "Align your shoulders over your hips"],
    ),
    PostureResult(
        score="Average",
        mistakes=["Lower your hips more", "Keep your back straight", "Don't let knees pass toes"],
    ),
    PostureResult(
        score="Needs Improvement",
        mistakes=[
            "Straighten your back",
            "Lower your hips",
            "Keep chest up",
            "Distribute weight evenly",
        ],
    ),
]


class MockPostureAnalyzer(PostureAnalyzer):
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def analyze(self, image: bytes) -> PostureResult:
        return self.rng.choice(MOCK_RESULTS)
