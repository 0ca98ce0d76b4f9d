"""Source and subscription application commands."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class CreateSourceCommand(BaseModel):
    """Create a new source owned by the caller."""

    user_id: str
    data: dict[str, Any]


class UpdateSourceCommand(BaseModel):
    """Update an owned source; non-editable fields are dropped."""

    source_id: str
    user_id: str
    updates: dict[str, Any] = Field(default_factory=dict)


class DeleteSourceCommand(BaseModel):
    """Delete an owned source."""

    source_id: str
    user_id: str


class SubscribeAction(StrEnum):
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


class ChangeSubscriptionCommand(BaseModel):
    """Subscribe to or unsubscribe from a community source."""

    user_id: str
    source_id: str
    action: SubscribeAction


class ToggleSubscriptionCommand(BaseModel):
    """Flip Subscribed <-> Unsubscribed."""

    user_id: str
    news_source_id: str


class RemoveSubscriptionCommand(BaseModel):
    """Delete the subscription row."""

    user_id: str
    news_source_id: str
