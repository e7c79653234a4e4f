from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from chamber.models.gallery import CATEGORIES, DEFAULT_CATEGORY
from .base import APIModel, RequestModel, required_text, non_empty_if_given, one_of


def _lenient_int(value) -> int:
    # multipart sends strings; anything unparsable sorts as 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class GalleryImageCreate(RequestModel):
    title: Optional[str] = Field(None, validate_default=True)
    description: Optional[str] = Field(None, validate_default=True)
    alt_text: Optional[str] = Field(None, validate_default=True)
    category: str = DEFAULT_CATEGORY
    order: int = 0

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> str:
        return required_text(v, "Title")

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> str:
        return required_text(v, "Description")

    @field_validator("alt_text")
    @classmethod
    def _alt_text(cls, v: Optional[str]) -> str:
        return required_text(v, "Alt text")

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return one_of(v or DEFAULT_CATEGORY, CATEGORIES)

    @field_validator("order", mode="before")
    @classmethod
    def _order(cls, v):
        return _lenient_int(v)


class GalleryImageUpdate(RequestModel):
    title: Optional[str] = None
    description: Optional[str] = None
    alt_text: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Title")

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Description")

    @field_validator("alt_text")
    @classmethod
    def _alt_text(cls, v: Optional[str]) -> Optional[str]:
        return non_empty_if_given(v, "Alt text")

    @field_validator("category")
    @classmethod
    def _category(cls, v: Optional[str]) -> Optional[str]:
        return one_of(v, CATEGORIES)

    @field_validator("order", mode="before")
    @classmethod
    def _order(cls, v):
        return None if v is None else _lenient_int(v)


class GalleryImage(APIModel):
    id: int
    title: str
    description: str
    image_url: str
    alt_text: str
    category: str
    uploaded_by: str
    order: int = 0
    is_active: bool
    uploaded_at: datetime
    updated_at: Optional[datetime] = None


class GalleryImageEnvelope(APIModel):
    message: str
    image: GalleryImage
