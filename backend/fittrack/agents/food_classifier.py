"""
Mock food recognition - returns one of a few known foods at random.
"""

import random
from typing import List, Optional

from ..models import DetectedFood, FoodAnalysis
from .base import FoodClassifier

MOCK_FOODS: List[DetectedFood] = [
    DetectedFood(name="Grilled Chicken Breast", calories=165, protein=31, carbs=0, fats=3.6, confidence=0.92),
    DetectedFood(name="Caesar Salad", calories=220, protein=8, carbs=12, fats=16, confidence=0.88),
    DetectedFood(name="Rice Bowl", calories=280, protein=5, carbs=60, fats=2, confidence=0.85),
    DetectedFood(name="Pizza Slice", calories=285, protein=12, carbs=36, fats=10, confidence=0.90),
]


class MockFoodClassifier(FoodClassifier):
    """Ignores the image and picks a food from ``MOCK_FOODS``."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def classify(self, image_url: str) -> FoodAnalysis:
        return FoodAnalysis(detected=True, food=self.rng.choice(MOCK_FOODS))
