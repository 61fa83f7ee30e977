"""Agents module - coach, food recognition, posture and step capabilities."""

from .base import CoachResponder, FoodClassifier, PostureAnalyzer, StepSource
from .coach import KeywordCoachResponder
from .food_classifier import MockFoodClassifier
from .posture import MockPostureAnalyzer
from .steps import RandomStepSource

__all__ = [
    'CoachResponder',
    'FoodClassifier',
    'PostureAnalyzer',
    'StepSource',
    'KeywordCoachResponder',
    'MockFoodClassifier',
    'MockPostureAnalyzer',
    'RandomStepSource',
]
