"""Task list and task schemas for command payloads and filters."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from models.board import (
    DEFAULT_LIST_COLOR,
    DEFAULT_TASK_XP,
    TaskPriority,
    TaskStatus,
    TaskType,
)

from .base import BaseSchema


def _clean_text(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty or only whitespace")
    return v


class TaskListCreate(BaseSchema):
    """Schema for creating a board column. Omitted position appends at the end."""

    project_id: str
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    position: int | None = None
    color: str = DEFAULT_LIST_COLOR
    is_default: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_text(v)


class TaskListUpdate(BaseSchema):
    """Schema for updating a board column."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    color: str | None = None
    is_default: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_text(v)


class TaskListReorder(BaseSchema):
    """Target left-to-right order of every list of one project."""

    ordered_list_ids: list[str]


class TaskCreate(BaseSchema):
    """Schema for creating a task. Omitted position appends at the end of the list."""

    list_id: str
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    type: TaskType = TaskType.task
    position: int | None = Field(None, ge=0)
    original_estimate: float | None = Field(None, ge=0)
    remaining_estimate: float | None = Field(None, ge=0)
    due_date: datetime | None = None
    start_date: datetime | None = None
    assignee_id: str | None = None
    reporter_id: str | None = None
    labels: set[str] = Field(default_factory=set)
    story_points: int | None = Field(None, ge=0)
    xp_value: int = Field(DEFAULT_TASK_XP, ge=0)
    estimated_pomodoros: int = Field(1, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return _clean_text(v)


class TaskUpdate(BaseSchema):
    """Schema for updating a task. Moving between lists goes through TaskMove."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    type: TaskType | None = None
    original_estimate: float | None = Field(None, ge=0)
    time_spent: float | None = Field(None, ge=0)
    remaining_estimate: float | None = Field(None, ge=0)
    due_date: datetime | None = None
    start_date: datetime | None = None
    assignee_id: str | None = None
    reporter_id: str | None = None
    labels: set[str] | None = None
    story_points: int | None = Field(None, ge=0)
    xp_value: int | None = Field(None, ge=0)
    estimated_pomodoros: int | None = Field(None, ge=0)
    actual_pomodoros: int | None = Field(None, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return _clean_text(v)


class TaskMove(BaseSchema):
    """Destination of a drag and drop move."""

    list_id: str
    position: int = Field(..., ge=0)


class TaskFilter(BaseSchema):
    """Schema for filtering tasks."""

    project_id: str | None = None
    list_id: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    type: TaskType | None = None
    assignee_id: str | None = None
    label: str | None = None
    due_date_from: datetime | None = None
    due_date_to: datetime | None = None
    search: str | None = None
