from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from .base import APIModel, RequestModel, required_text
from .notice import PdfFile


class FormSubmissionCreate(RequestModel):
    name: Optional[str] = Field(None, validate_default=True)
    email: EmailStr
    phone: Optional[str] = Field(None, validate_default=True)
    message: Optional[str] = Field(None, validate_default=True)
    category: str = "general"
    address: str = ""

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> str:
        return required_text(v, "Name")

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: Optional[str]) -> str:
        return required_text(v, "Phone")

    @field_validator("message")
    @classmethod
    def _message(cls, v: Optional[str]) -> str:
        return required_text(v, "Message")

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return v or "general"

    @field_validator("address", mode="before")
    @classmethod
    def _address(cls, v):
        return v or ""


class FormSubmission(APIModel):
    id: int
    name: str
    email: str
    phone: str
    message: str
    category: str
    address: str = ""
    pdf_file: Optional[PdfFile] = None
    submitted_at: datetime


class FormSubmissionEnvelope(APIModel):
    message: str
    submission: FormSubmission
