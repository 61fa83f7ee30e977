"""
Authentication API endpoints.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from ..core import ActivityLog
from ..identity import AccountExistsError, IdentityService, InvalidCredentialsError
from ..models import LoginRequest, SignupRequest, Token, UserInfo
from ..storage import KeyValueStore
from .deps import get_current_user, get_identity, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    identity: IdentityService = Depends(get_identity),
    store: KeyValueStore = Depends(get_store),
):
    """
    Create an account and its profile in one step.

    Args:
        signup_data: Credentials plus the onboarding profile fields

    Returns:
        The created user's id, e-mail and name

    Raises:
        HTTPException: 400 if the e-mail is already registered
    """
    profile_fields = signup_data.model_dump(
        by_alias=True, exclude={"email", "password"}
    )

    async def write_profile(account):
        await ActivityLog(store, account["id"]).create_profile(account["email"], profile_fields)

    try:
        account = await identity.create_account(
            email=signup_data.email,
            password=signup_data.password,
            name=signup_data.name,
            on_created=write_profile,
        )
    except AccountExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    user = UserInfo(id=account["id"], email=account["email"], name=account["name"])
    return {"user": user}


@router.post("/login", response_model=Token)
async def login(
    credentials: LoginRequest,
    identity: IdentityService = Depends(get_identity),
):
    """
    Exchange e-mail and password for a bearer token.

    Raises:
        HTTPException: 401 if the credentials do not match an account
    """
    try:
        account = await identity.authenticate(credentials.email, credentials.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(
        access_token=identity.create_access_token(account),
        user_id=account["id"],
        email=account["email"],
    )


@router.get("/me", response_model=UserInfo)
async def get_me(account: Dict[str, Any] = Depends(get_current_user)):
    """Identity behind the presented token."""
    return UserInfo(id=account["id"], email=account["email"], name=account.get("name"))
