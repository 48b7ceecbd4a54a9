"""Project schemas for command payloads and filters."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from models.project import ProjectPriority, ProjectStatus

from .base import BaseSchema


def _clean_name(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or only whitespace")
    return v


class ProjectCreate(BaseSchema):
    """Schema for creating a new project."""

    name: str = Field(..., min_length=1, max_length=255)
    folder_id: str
    description: str | None = None
    status: ProjectStatus = ProjectStatus.active
    priority: ProjectPriority = ProjectPriority.medium
    due_date: datetime | None = None
    start_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the project name."""
        return _clean_name(v)


class ProjectUpdate(BaseSchema):
    """Schema for updating a project. A new ``folder_id`` moves the project."""

    name: str | None = Field(None, min_length=1, max_length=255)
    folder_id: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    due_date: datetime | None = None
    start_date: datetime | None = None
    xp_earned: int | None = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the project name."""
        return _clean_name(v)


class ProjectSortEnum(str, Enum):
    name = "name"
    created = "created"
    status = "status"
    priority = "priority"
    last_modified = "last_modified"


class ProjectFilter(BaseSchema):
    """Schema for filtering projects."""

    folder_id: str | None = None
    status: ProjectStatus | None = None
    search: str | None = None
    sort_by: ProjectSortEnum = ProjectSortEnum.created
