"""Models module."""

from .user import (
    ProfileFields, SignupRequest, ProfileUpdate, LoginRequest, UserInfo, Token, TokenData
)
from .workout import Exercise, WorkoutDefinition
from .activity import (
    WorkoutLogCreate, FoodLogCreate, WeightLogCreate, LogAck, parse_iso_date
)
from .coach import (
    ChatRequest, ChatResponse, ChatMessage, FoodAnalysisRequest, DetectedFood,
    FoodAnalysis, PostureResult
)
from .stats import DailyStats, WeightTrend, MacroTotals, MealGroup, MealBreakdown, ProgressSummary

__all__ = [
    'ProfileFields', 'SignupRequest', 'ProfileUpdate', 'LoginRequest', 'UserInfo', 'Token',
    'TokenData',
    'Exercise', 'WorkoutDefinition',
    'WorkoutLogCreate', 'FoodLogCreate', 'WeightLogCreate', 'LogAck', 'parse_iso_date',
    'ChatRequest', 'ChatResponse', 'ChatMessage', 'FoodAnalysisRequest', 'DetectedFood',
    'FoodAnalysis', 'PostureResult',
    'DailyStats', 'WeightTrend', 'MacroTotals', 'MealGroup', 'MealBreakdown', 'ProgressSummary',
]
