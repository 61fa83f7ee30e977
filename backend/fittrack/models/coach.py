"""
Coach Models - chat messages and canned analysis results.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from .base import CamelModel


class ChatRequest(BaseModel):
    """A message sent to the coach."""
    message: str = Field(..., min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    """The coach's reply."""
    response: str


class ChatMessage(BaseModel):
    """One stored transcript entry."""
    role: Literal["user", "assistant"]
    message: str
    timestamp: str


class FoodAnalysisRequest(CamelModel):
    """Image reference to classify."""
    image_url: str = Field(..., min_length=1)


class DetectedFood(BaseModel):
    """Nutrition facts of a recognised food, per serving."""
    name: str
    calories: float
    protein: float
    carbs: float
    fats: float
    confidence: float


class FoodAnalysis(BaseModel):
    """Result of a food image analysis."""
    detected: bool
    food: Optional[DetectedFood] = None


class PostureResult(BaseModel):
    """Form feedback for a captured exercise pose."""
    score: Literal["Good", "Average", "Needs Improvement"]
    mistakes: List[str]
