"""Focus session event schemas."""

from pydantic import Field

from .base import BaseSchema


class FocusSessionCompleted(BaseSchema):
    """Completion event emitted by the focus timer."""

    task_id: str | None = None
    xp_amount: int | None = Field(None, ge=0)
    duration_minutes: float = Field(25, ge=0)
