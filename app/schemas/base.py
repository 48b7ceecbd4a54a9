"""Base schemas for the application."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from models.base import ensure_utc


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*")
    @classmethod
    def normalize_datetimes(cls, v: Any) -> Any:
        return ensure_utc(v)


class ResponseSchema(BaseModel):
    """Standard API response schema."""
    status: str
    message: Optional[str] = None
    data: Optional[Any] = None


def dump(entity: BaseModel) -> dict[str, Any]:
    """Serialize an entity or schema for a response payload."""
    return entity.model_dump(mode="json", by_alias=True)
