"""Bearer token authentication against the data service.

The data service is the only token issuer, so every request token is verified
remotely via ``DataServiceGateway.verify_token``.
"""

from __future__ import annotations

from fastapi import Depends, Request

from src.core.application.security import AuthContext
from src.core.domain.exceptions import UnauthorizedError
from src.core.infrastructure.data_service.client import DataServiceGateway
from src.core.infrastructure.data_service.dependencies import get_data_service_gateway


def _extract_bearer_token(request: Request) -> str | None:
    """Return the raw token, '' for a malformed header, None when absent."""
    auth_header = request.headers.get("Authorization")
    if auth_header is None:
        return None
    if not auth_header.lower().startswith("bearer "):
        return ""
    return auth_header[7:].strip()


async def _authenticate(token: str, gateway: DataServiceGateway) -> AuthContext:
    if not token:
        raise UnauthorizedError("Missing or invalid authorization header")
    user = await gateway.verify_token(token)
    if not user.id:
        raise UnauthorizedError("Invalid authentication token")
    return AuthContext(user_id=user.id, access_token=token, email=user.email)


async def get_current_auth(
    request: Request,
    gateway: DataServiceGateway = Depends(get_data_service_gateway),
) -> AuthContext:
    """Require ``Authorization: Bearer <token>``.

    Raises:
        UnauthorizedError when the header is missing or the token is rejected.
    """
    token = _extract_bearer_token(request)
    if token is None:
        raise UnauthorizedError("Authentication required")
    return await _authenticate(token, gateway)


async def get_optional_auth(
    request: Request,
    gateway: DataServiceGateway = Depends(get_data_service_gateway),
) -> AuthContext | None:
    token = _extract_bearer_token(request)
    if token is None:
        return None
    return await _authenticate(token, gateway)
