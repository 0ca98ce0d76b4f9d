"""Client for the briefing backend."""

from src.client.api_client import BriefingApiClient
from src.client.exceptions import (
    ApiClientError,
    SignInRequiredError,
    SubscriptionLimitError,
)
from src.client.session import ClientSession, create_client

__all__ = [
    "ApiClientError",
    "BriefingApiClient",
    "ClientSession",
    "SignInRequiredError",
    "SubscriptionLimitError",
    "create_client",
]
