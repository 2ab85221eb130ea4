"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """Signup request. Role defaults to student."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    full_name: str = Field(..., alias="fullName", min_length=1, max_length=128)
    role: str = "student"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """Public view of an account. Never includes the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    email: str
    full_name: str = Field(..., alias="fullName")
    role: str
    avatar_url: str | None = None
    points: int
    level: int
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
