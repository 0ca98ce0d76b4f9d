"""Data service adapter."""

from src.core.infrastructure.data_service.client import (
    AuthenticatedUser,
    DataServiceClient,
    DataServiceGateway,
    TokenGrant,
)
from src.core.infrastructure.data_service.errors import DataServiceError

__all__ = [
    "AuthenticatedUser",
    "DataServiceClient",
    "DataServiceError",
    "DataServiceGateway",
    "TokenGrant",
]
