"""Folder schemas for command payloads."""

from __future__ import annotations

from pydantic import Field, field_validator

from models.folder import DEFAULT_FOLDER_COLOR, DEFAULT_FOLDER_ICON

from .base import BaseSchema


def _clean_name(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Folder name cannot be empty or only whitespace")
    return v


class FolderCreate(BaseSchema):
    """Schema for creating a new folder."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str = DEFAULT_FOLDER_COLOR
    icon: str = DEFAULT_FOLDER_ICON
    parent_id: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the folder name."""
        return _clean_name(v)


class FolderUpdate(BaseSchema):
    """Schema for updating a folder. ``parent_id=None`` moves it to the root."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    parent_id: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the folder name."""
        return _clean_name(v)
