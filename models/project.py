"""
Project model, owned by exactly one folder.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import BaseModel, utcnow


class ProjectStatus(str, Enum):
    active = "active"
    completed = "completed"
    on_hold = "on-hold"
    cancelled = "cancelled"


class ProjectPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


PROJECT_PRIORITY_ORDER = {
    ProjectPriority.low: 0,
    ProjectPriority.medium: 1,
    ProjectPriority.high: 2,
}


class Project(BaseModel):
    """
    Represents a project entity in the application.

    ``task_count`` and ``completed_task_count`` are denormalized caches; the
    board service recomputes them after every task mutation.
    """

    name: str = Field(..., min_length=1)
    description: str | None = None
    folder_id: str
    status: ProjectStatus = ProjectStatus.active
    priority: ProjectPriority = ProjectPriority.medium
    due_date: datetime | None = None
    start_date: datetime | None = None
    task_count: int = Field(default=0, ge=0)
    completed_task_count: int = Field(default=0, ge=0)
    xp_earned: int = Field(default=0, ge=0)
    last_modified: datetime = Field(default_factory=utcnow)
