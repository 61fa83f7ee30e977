"""
Posture API endpoints - form feedback from a captured camera frame.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from ..agents import PostureAnalyzer
from ..models import PostureResult
from .deps import get_current_user_id, get_posture_analyzer

router = APIRouter(prefix="/posture", tags=["posture"])

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}


@router.post("/analyze", response_model=PostureResult)
async def analyze_posture(
    image: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    analyzer: PostureAnalyzer = Depends(get_posture_analyzer),
):
    """
    Score the exercise form in an uploaded frame.

    Raises:
        HTTPException: 400 for non-image uploads or an empty file
    """
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported image type: {image.content_type}"
        )

    data = await image.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image")

    return analyzer.analyze(data)
