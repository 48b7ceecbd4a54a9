"""Comment schemas for command payloads."""

from pydantic import Field, field_validator

from .base import BaseSchema
from .board import _clean_text


class CommentCreate(BaseSchema):
    """Schema for adding a comment to a task."""

    task_id: str
    author_id: str = Field(..., min_length=1)
    author_name: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)

    @field_validator("author_id", "author_name", "content")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _clean_text(v)


class CommentUpdate(BaseSchema):
    """Schema for editing a comment."""

    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _clean_text(v)
