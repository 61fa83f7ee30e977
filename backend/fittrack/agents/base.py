"""
Capability interfaces for the coach, food recognition, posture check and step counting.

Each interface has one shipped implementation that is deliberately trivial
(keyword table, random pick). A real model plugs in by implementing the same
method and being installed on ``app.state`` at startup.
"""

from abc import ABC, abstractmethod
from datetime import date

from ..models import FoodAnalysis, PostureResult


class CoachResponder(ABC):
    """Turns a user chat message into the coach's reply."""

    name: str = "coach"

    @abstractmethod
    def respond(self, message: str) -> str:
        """
        Produce a reply to ``message``.

        Args:
            message: The user's message, as typed

        Returns:
            The reply text
        """
        pass


class FoodClassifier(ABC):
    """Recognises a food and its nutrition facts from an image."""

    @abstractmethod
    def classify(self, image_url: str) -> FoodAnalysis:
        pass


class PostureAnalyzer(ABC):
    """Scores exercise form from a captured camera frame."""

    @abstractmethod
    def analyze(self, image: bytes) -> PostureResult:
        pass


class StepSource(ABC):
    """Supplies the step count for a user and day."""

    @abstractmethod
    def steps_for(self, user_id: str, day: date) -> int:
        pass
