"""
Activity log entry model.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from .base import EntityModel, new_id, utcnow


class EntityType(str, Enum):
    folder = "folder"
    project = "project"
    list = "list"
    task = "task"


class ActivityAction(str, Enum):
    created = "created"
    updated = "updated"
    deleted = "deleted"
    moved = "moved"
    commented = "commented"


class ActivityLogEntry(EntityModel):
    """An immutable record of one structural mutation."""

    id: str = Field(default_factory=new_id)
    entity_type: EntityType
    entity_id: str
    action: ActivityAction
    description: str
    user_id: str
    metadata: dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=utcnow)
