"""
FastAPI dependencies - bearer authentication and access to the services built at startup.
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..agents import CoachResponder, FoodClassifier, PostureAnalyzer, StepSource
from ..config import Settings
from ..core import ActivityLog, WorkoutCatalog
from ..identity import IdentityService
from ..storage import KeyValueStore

# auto_error=False so a missing header is reported as 401, same as a bad token
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


def get_identity(request: Request) -> IdentityService:
    return request.app.state.identity


def get_catalog(request: Request) -> WorkoutCatalog:
    return request.app.state.catalog


def get_coach(request: Request) -> CoachResponder:
    return request.app.state.coach


def get_food_classifier(request: Request) -> FoodClassifier:
    return request.app.state.food_classifier


def get_posture_analyzer(request: Request) -> PostureAnalyzer:
    return request.app.state.posture_analyzer


def get_step_source(request: Request) -> StepSource:
    return request.app.state.step_source


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity: IdentityService = Depends(get_identity),
) -> Dict[str, Any]:
    """
    Resolve the bearer token to its account.

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    account = await identity.get_user(credentials.credentials)
    if account is None:
        raise credentials_exception
    return account


async def get_current_user_id(account: Dict[str, Any] = Depends(get_current_user)) -> str:
    return account["id"]


def get_activity_log(
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
) -> ActivityLog:
    """The authenticated user's ``ActivityLog``."""
    return ActivityLog(store, user_id)


def get_day(
    day: Optional[date] = Query(
        None,
        alias="date",
        description="Calendar day (YYYY-MM-DD) in the client's time zone; defaults to the server's today"
    )
) -> date:
    return day or date.today()
