"""
Task comment model.
"""

from pydantic import Field

from .base import BaseModel


class TaskComment(BaseModel):
    """A comment on a task. ``author_name`` is a snapshot taken at creation."""

    task_id: str
    author_id: str
    author_name: str
    content: str = Field(..., min_length=1)
