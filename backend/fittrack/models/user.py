"""
User Models - accounts, tokens and the fitness profile.
"""

from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

from .base import CamelModel

Goal = Literal["lose", "gain", "maintain"]
ActivityLevel = Literal["sedentary", "light", "moderate", "very"]


class ProfileFields(CamelModel):
    """Demographic and goal attributes collected during onboarding."""
    name: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    height: Optional[float] = Field(None, ge=0)  # cm
    weight: Optional[float] = Field(None, ge=0)  # kg
    goal: Optional[Goal] = None
    activity_level: Optional[ActivityLevel] = None
    diet_preference: Optional[str] = None
    daily_calorie_goal: Optional[int] = Field(None, ge=0)  # kcal


class SignupRequest(ProfileFields):
    """Account creation with the initial profile."""
    email: EmailStr
    password: str = Field(..., min_length=6)


class ProfileUpdate(ProfileFields):
    """Partial profile update - only fields present in the request are applied."""
    pass


class LoginRequest(BaseModel):
    """E-mail/password sign-in."""
    email: EmailStr
    password: str


class UserInfo(BaseModel):
    """Public identity of an account."""
    id: str
    email: str
    name: Optional[str] = None


class Token(BaseModel):
    """JWT token response model."""
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class TokenData(BaseModel):
    """Token payload data."""
    user_id: Optional[str] = None
    email: Optional[str] = None
