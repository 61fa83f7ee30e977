"""
Profile API endpoints.
"""

from fastapi import APIRouter, Depends

from ..core import ActivityLog
from ..models import ProfileUpdate
from .deps import get_activity_log

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(log: ActivityLog = Depends(get_activity_log)):
    """The current user's profile; ``null`` if none was stored."""
    return {"profile": await log.get_profile()}


@router.put("")
async def update_profile(
    profile_update: ProfileUpdate,
    log: ActivityLog = Depends(get_activity_log),
):
    """
    Merge the provided fields into the profile.
    Fields absent from the request body keep their stored value.
    """
    updates = profile_update.model_dump(by_alias=True, exclude_unset=True)
    return {"profile": await log.update_profile(updates)}
