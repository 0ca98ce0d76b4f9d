"""User profile application commands."""

from typing import Any

from pydantic import BaseModel, Field


class EnsureProfileCommand(BaseModel):
    """Load the caller's profile, creating it on first access."""

    user_id: str
    email: str | None = None


class UpdateProfileCommand(BaseModel):
    """Update user profile; unknown fields are dropped."""

    user_id: str
    updates: dict[str, Any] = Field(default_factory=dict)
