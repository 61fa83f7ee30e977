"""
Coach API endpoints - chat with the coach and read the transcript.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..agents import CoachResponder
from ..core import ActivityLog
from ..core.tips import daily_tip
from ..models import ChatMessage, ChatRequest, ChatResponse
from .deps import get_activity_log, get_coach

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coach", tags=["coach"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    chat_request: ChatRequest,
    log: ActivityLog = Depends(get_activity_log),
    coach: CoachResponder = Depends(get_coach),
):
    """
    Send a message to the coach.

    The user message and the reply are appended to the transcript as two
    entries, user first.
    """
    await log.append_chat("user", chat_request.message)
    response = coach.respond(chat_request.message)
    await log.append_chat("assistant", response)

    logger.info(
        f"Coach reply for user {log.user_id} via {coach.name}",
        extra={"extra_fields": {"user_id": log.user_id, "responder": coach.name}}
    )
    return ChatResponse(response=response)


@router.get("/history")
async def chat_history(log: ActivityLog = Depends(get_activity_log)):
    """The full transcript, ascending by timestamp."""
    messages = [ChatMessage(**record) for record in await log.list_chat()]
    return {"messages": messages}


@router.get("/tip")
async def tip(day: Optional[date] = Query(None, alias="date")):
    """Tip of the day. Open to anonymous callers."""
    return {"tip": daily_tip(day)}
