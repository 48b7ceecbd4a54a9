"""Focus session API controller."""

import logging

from fastapi import APIRouter, Depends

from app.core.dependencies import get_focus_service
from app.domains.focus.service import FocusService
from app.schemas.base import ResponseSchema, dump
from app.schemas.focus import FocusSessionCompleted

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/focus", tags=["focus"])


@router.post("/sessions/completed", response_model=ResponseSchema)
async def focus_session_completed(
    event: FocusSessionCompleted,
    service: FocusService = Depends(get_focus_service),
):
    """Record a finished work session against its task.

    Sessions without a task, or for a task that no longer exists, are accepted
    and ignored.
    """

    task = service.session_completed(event)
    if not task:
        return ResponseSchema(status="success", message="Focus session ignored", data=None)

    return ResponseSchema(
        status="success",
        message="Focus session recorded successfully",
        data=dump(task),
    )
