"""
Folder model for grouping projects.
"""

from datetime import datetime

from pydantic import Field

from .base import BaseModel, utcnow

DEFAULT_FOLDER_COLOR = "#3b82f6"
DEFAULT_FOLDER_ICON = "📁"


class Folder(BaseModel):
    """
    Represents a folder, optionally nested under a parent folder.

    ``path`` holds the ordered names from the root folder down to this one and
    is maintained by the folder service whenever a name or parent changes.
    ``is_expanded`` is UI state only and never counts as a structural change.
    """

    name: str = Field(..., min_length=1)
    description: str | None = None
    color: str = DEFAULT_FOLDER_COLOR
    icon: str = DEFAULT_FOLDER_ICON
    parent_id: str | None = None
    path: list[str] = Field(default_factory=list)
    project_count: int = Field(default=0, ge=0)
    is_expanded: bool = False
    last_modified: datetime = Field(default_factory=utcnow)
