from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from chamber.models.news import CATEGORIES, DEFAULT_CATEGORY
from .base import APIModel, RequestModel, non_empty_if_given, one_of

MIN_TITLE_LENGTH = 3
MIN_CONTENT_LENGTH = 10


class NewsCreate(RequestModel):
    title: Optional[str] = Field(None, validate_default=True)
    content: Optional[str] = Field(None, validate_default=True)
    category: str = DEFAULT_CATEGORY
    image_url: str = ""
    is_featured: bool = False

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Title and content are required")
        if len(v) < MIN_TITLE_LENGTH:
            raise ValueError(f"Title must be at least {MIN_TITLE_LENGTH} characters long")
        return v

    @field_validator("content")
    @classmethod
    def _content(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Title and content are required")
        if len(v) < MIN_CONTENT_LENGTH:
            raise ValueError(f"Content must be at least {MIN_CONTENT_LENGTH} characters long")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return one_of(v or DEFAULT_CATEGORY, CATEGORIES)

    @field_validator("image_url", mode="before")
    @classmethod
    def _image_url(cls, v):
        return v or ""


class NewsUpdate(RequestModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Title")

    @field_validator("content")
    @classmethod
    def _content(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Content")

    @field_validator("category")
    @classmethod
    def _category(cls, v: Optional[str]) -> Optional[str]:
        return one_of(v, CATEGORIES)


class News(APIModel):
    id: int
    title: str
    content: str
    category: str
    author: str
    image_url: str = ""
    is_active: bool
    is_featured: bool
    published_at: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None
