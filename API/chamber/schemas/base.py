from datetime import datetime, timezone
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Response model: snake_case attributes, camelCase JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*")
    @classmethod
    def _assume_utc(cls, v):
        # rows store naive UTC; responses carry the offset
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class RequestModel(BaseModel):
    """Request DTO: camelCase (or snake_case) keys, unknown keys rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Message(BaseModel):
    message: str


def required_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{label} is required")
    return value.strip()


def non_empty_if_given(value: Optional[str], label: str) -> Optional[str]:
    if value is None:
        return None
    if not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value.strip()


def one_of(value: Optional[str], allowed: Iterable[str]) -> Optional[str]:
    allowed = tuple(allowed)
    if value is None:
        return None
    if value not in allowed:
        raise ValueError(f"Invalid category. Must be one of: {', '.join(allowed)}")
    return value


def to_event(schema: type, obj) -> dict:
    """Serialize an ORM row through a response schema for a real-time payload."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)
