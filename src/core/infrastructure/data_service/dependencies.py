"""FastAPI dependencies for the data service adapter."""

import httpx
from fastapi import Depends, Request

from src.core.application.security import (
    AuthContext,
    get_current_auth,
    get_optional_auth,
)
from src.core.config import settings
from src.core.infrastructure.data_service.client import (
    DataServiceClient,
    DataServiceGateway,
)


def create_http_client() -> httpx.AsyncClient:
    """Process-wide HTTP client, opened and closed by the app lifespan."""
    return httpx.AsyncClient(timeout=settings.DATA_SERVICE_TIMEOUT_SEC)


def get_data_service_gateway(request: Request) -> DataServiceGateway:
    return request.app.state.data_service


async def get_user_data_client(
    auth: AuthContext = Depends(get_current_auth),
    gateway: DataServiceGateway = Depends(get_data_service_gateway),
) -> DataServiceClient:
    return gateway.for_user(auth.access_token)


async def get_public_data_client(
    auth: AuthContext | None = Depends(get_optional_auth),
    gateway: DataServiceGateway = Depends(get_data_service_gateway),
) -> DataServiceClient:
    if auth is None:
        return gateway.anonymous()
    return gateway.for_user(auth.access_token)


async def get_elevated_data_client(
    gateway: DataServiceGateway = Depends(get_data_service_gateway),
) -> DataServiceClient:
    return gateway.elevated()
