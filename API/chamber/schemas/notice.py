from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from chamber.models.notice import PRIORITIES, DEFAULT_PRIORITY
from .base import APIModel, RequestModel, required_text, non_empty_if_given


def normalize_priority(value: Optional[str]) -> str:
    """Unknown or missing priorities fall back to 'normal'."""
    if value and value.strip().lower() in PRIORITIES:
        return value.strip().lower()
    return DEFAULT_PRIORITY


class PdfFile(APIModel):
    filename: str
    original_name: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None


class NoticeCreate(RequestModel):
    title: Optional[str] = Field(None, validate_default=True)
    content: Optional[str] = Field(None, validate_default=True)
    priority: Optional[str] = Field(None, validate_default=True)

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> str:
        return required_text(v, "Title")

    @field_validator("content")
    @classmethod
    def _content(cls, v: Optional[str]) -> str:
        return required_text(v, "Content")

    @field_validator("priority")
    @classmethod
    def _priority(cls, v: Optional[str]) -> str:
        return normalize_priority(v)


class NoticeUpdate(RequestModel):
    title: Optional[str] = None
    content: Optional[str] = None
    priority: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Title")

    @field_validator("content")
    @classmethod
    def _content(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Content")

    @field_validator("priority")
    @classmethod
    def _priority(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else normalize_priority(v)


class Notice(APIModel):
    id: int
    title: str
    content: str
    author: str
    priority: str
    pdf_file: Optional[PdfFile] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class NoticeEnvelope(APIModel):
    message: str
    notice: Notice
