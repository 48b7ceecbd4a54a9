"""
Board models: task lists (Kanban columns) and the tasks ordered inside them.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_serializer

from .base import BaseModel

DEFAULT_LIST_COLOR = "#64748b"
DEFAULT_TASK_XP = 25


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in-progress"
    review = "review"
    testing = "testing"
    done = "done"
    blocked = "blocked"


class TaskPriority(str, Enum):
    lowest = "lowest"
    low = "low"
    medium = "medium"
    high = "high"
    highest = "highest"


class TaskType(str, Enum):
    task = "task"
    story = "story"
    bug = "bug"
    epic = "epic"
    subtask = "subtask"


class TaskList(BaseModel):
    """
    A column of a project's board.

    ``position`` is a sort key among the lists of one project, not a unique
    index; equal positions keep insertion order.
    """

    name: str = Field(..., min_length=1)
    description: str | None = None
    project_id: str
    position: int = 0
    color: str = DEFAULT_LIST_COLOR
    is_default: bool = False
    task_count: int = Field(default=0, ge=0)


class Task(BaseModel):
    """
    A single work item.

    ``project_id`` always mirrors the project of the owning list; ``position``
    is kept compact (0..n-1) inside the list by the board service.
    """

    title: str = Field(..., min_length=1)
    description: str | None = None
    project_id: str
    list_id: str
    status: TaskStatus = TaskStatus.todo
    blocked_from: TaskStatus | None = None
    priority: TaskPriority = TaskPriority.medium
    type: TaskType = TaskType.task

    # Time tracking, in hours
    original_estimate: float | None = Field(default=None, ge=0)
    time_spent: float = Field(default=0.0, ge=0)
    remaining_estimate: float | None = Field(default=None, ge=0)

    due_date: datetime | None = None
    start_date: datetime | None = None
    completed_at: datetime | None = None

    assignee_id: str | None = None
    reporter_id: str | None = None
    labels: set[str] = Field(default_factory=set)
    story_points: int | None = Field(default=None, ge=0)

    xp_value: int = Field(default=DEFAULT_TASK_XP, ge=0)
    estimated_pomodoros: int = Field(default=1, ge=0)
    actual_pomodoros: int = Field(default=0, ge=0)
    position: int = Field(default=0, ge=0)

    @field_serializer("labels")
    def serialize_labels(self, labels: set[str]) -> list[str]:
        return sorted(labels)
