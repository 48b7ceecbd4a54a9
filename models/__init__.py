"""
Models package initialization.
"""

from .activity import ActivityAction, ActivityLogEntry, EntityType
from .base import BaseModel, EntityModel, new_id, utcnow
from .board import Task, TaskList, TaskPriority, TaskStatus, TaskType
from .comment import TaskComment
from .folder import Folder
from .project import Project, ProjectPriority, ProjectStatus

__all__ = [
    "BaseModel",
    "EntityModel",
    "new_id",
    "utcnow",
    "Folder",
    "Project",
    "ProjectStatus",
    "ProjectPriority",
    "TaskList",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskType",
    "TaskComment",
    # Activity log
    "ActivityLogEntry",
    "EntityType",
    "ActivityAction",
]
