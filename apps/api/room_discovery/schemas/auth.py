"""Schemas for signup and login."""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]


class SignupRequest(BaseModel):
    name: DisplayName
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserView(BaseModel):
    """Public projection of a user; never carries the secret."""

    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserView
