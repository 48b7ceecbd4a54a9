"""
Defines the base entity for the in-memory board store.

This module provides a base class for the pydantic domain entities, including
standard attributes for identifying and timestamping records. Identifiers are
random UUID4 strings and timestamps are timezone-aware UTC datetimes. Every
entity serializes with camelCase keys so snapshots keep the shape the client
expects (``taskLists``, ``lastModified``, ...), while Python code works with
snake_case attributes.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Return a new unique entity identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Any) -> Any:
    """Return ``value`` as an aware UTC datetime. Naive datetimes are read as UTC."""
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EntityModel(PydanticBaseModel):
    """Common configuration for every stored entity."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        use_enum_values=False,
    )

    @field_validator("*")
    @classmethod
    def normalize_datetimes(cls, v: Any) -> Any:
        return ensure_utc(v)


class BaseModel(EntityModel):
    """
    Base model class for board entities.

    :ivar id: Unique identifier for the record.
    :type id: str
    :ivar created_at: Timestamp representing when the record was created.
    :type created_at: datetime
    :ivar updated_at: Timestamp representing when the record was last updated.
    :type updated_at: datetime
    """

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self, now: datetime | None = None) -> datetime:
        """Set ``updated_at`` to ``now`` and return it."""
        self.updated_at = now or utcnow()
        return self.updated_at
