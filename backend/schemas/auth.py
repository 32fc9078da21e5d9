"""Authentication schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Dashboard login request."""

    password: str = Field(min_length=1, max_length=200)


class AuthResponse(BaseModel):
    success: bool
