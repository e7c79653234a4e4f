from datetime import datetime
from typing import Optional
from pydantic import EmailStr, field_validator

from .base import APIModel, RequestModel, required_text

MIN_PASSWORD_LENGTH = 8


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip()
    return value


def _min_length_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return value


class _EmailRequest(RequestModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, v):
        return _normalize_email(v)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class RegisterRequest(_EmailRequest):
    name: str
    password: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return required_text(v, "Name")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class LoginRequest(_EmailRequest):
    password: str


class ForgotPasswordRequest(_EmailRequest):
    pass


class ResetPasswordRequest(RequestModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _min_length_password(v)


class ChangePasswordRequest(RequestModel):
    current_password: str
    new_password: str

    @field_validator("current_password")
    @classmethod
    def _current(cls, v: str) -> str:
        if not v:
            raise ValueError("Current password and new password are required")
        return v

    @field_validator("new_password")
    @classmethod
    def _new(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v


class AdminCreate(RegisterRequest):
    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _min_length_password(v)


class ProfileUpdate(_EmailRequest):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return required_text(v, "Name")


class TokenClaims(APIModel):
    user_id: int
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserPublic(APIModel):
    id: int
    name: str
    email: str
    role: str


class UserProfile(UserPublic):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(APIModel):
    message: str
    token: str
    user: UserPublic


class ForgotPasswordResponse(APIModel):
    message: str
    success: bool
    email_sent: bool
    email_method: str
    reset_url: Optional[str] = None


class ResetTokenStatus(APIModel):
    message: str
    success: bool
    email: str
    name: str


class UserEnvelope(APIModel):
    message: str
    user: UserProfile
