"""HTTP adapter for the hosted data service.

数据服务对外提供两组接口：
- ``/rest/v1/<table>``: 行级读写，权限由数据服务的 RLS 策略根据 bearer token 决定
- ``/auth/v1/*``: token 校验、密码登录、刷新、登出

``DataServiceGateway`` 持有进程级共享的 ``httpx.AsyncClient``，按调用方身份派生
``DataServiceClient``（用户身份 / 匿名 / 服务密钥）。
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict

from src.core.config import settings
from src.core.domain.exceptions import UnauthorizedError
from src.core.domain.ports.row_store import Filter
from src.core.infrastructure.data_service.errors import DataServiceError
from src.core.infrastructure.health import DataServiceHealthResult, HealthStatus


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _encode_filter(flt: Filter) -> tuple[str, str]:
    column, operator, value = flt
    if operator == "or":
        parts = (".".join(_encode_filter(inner)) for inner in value)
        return "or", f"({','.join(parts)})"
    if operator == "in":
        quoted = ",".join(
            '"{}"'.format(_format_value(v).replace('"', '\\"')) for v in value
        )
        return column, f"in.({quoted})"
    if operator == "eq" and value is None:
        return column, "is.null"
    return column, f"{operator}.{_format_value(value)}"


class AuthenticatedUser(BaseModel):
    """Identity resolved from a bearer token."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None


class TokenGrant(BaseModel):
    """Access/refresh token pair issued by the auth endpoints."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    user: AuthenticatedUser


class DataServiceClient:
    """Row access scoped to one credential."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        bearer: str,
    ) -> None:
        self._http = http
        self._base_url = base_url
        self._api_key = api_key
        self._bearer = bearer

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._bearer}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rest/v1/{table}"
        try:
            response = await self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(prefer),
            )
        except httpx.HTTPError as exc:
            logger.warning(f"Data service {method} {table} failed: {exc}")
            raise DataServiceError(str(exc)) from exc

        if response.status_code >= 400:
            upstream_code = None
            try:
                body = response.json()
                detail = body.get("message") or response.text
                upstream_code = body.get("code")
            except ValueError:
                detail = response.text
            logger.warning(
                f"Data service {method} {table} returned {response.status_code}: {detail}"
            )
            raise DataServiceError(
                detail, status_code=response.status_code, upstream_code=upstream_code
            )

        if response.status_code == 204 or not response.content:
            return []
        payload = response.json()
        if isinstance(payload, dict):
            return [payload]
        return payload

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: tuple[str, bool] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select rows. ``order`` is ``(column, ascending)``."""
        params = [("select", columns)]
        params.extend(_encode_filter(flt) for flt in filters)
        if order is not None:
            column, ascending = order
            params.append(("order", f"{column}.{'asc' if ascending else 'desc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._request("GET", table, params=params)

    async def select_one(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: tuple[str, bool] | None = None,
    ) -> dict[str, Any] | None:
        rows = await self.select(
            table, columns=columns, filters=filters, order=order, limit=1
        )
        return rows[0] if rows else None

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = await self._request(
            "POST", table, json=row, prefer="return=representation"
        )
        if not rows:
            raise DataServiceError(f"insert into {table} returned no row")
        return rows[0]

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        """Update matching rows and return them (empty when nothing matched)."""
        params = [_encode_filter(flt) for flt in filters]
        return await self._request(
            "PATCH", table, params=params, json=values, prefer="return=representation"
        )

    async def delete(
        self,
        table: str,
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        params = [_encode_filter(flt) for flt in filters]
        return await self._request(
            "DELETE", table, params=params, prefer="return=representation"
        )


class DataServiceGateway:
    """Entry point to the data service, shared by all requests."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        base_url: str,
        anon_key: str,
        service_key: str,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._service_key = service_key

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient) -> DataServiceGateway:
        return cls(
            http,
            base_url=settings.DATA_SERVICE_URL,
            anon_key=settings.DATA_SERVICE_ANON_KEY,
            service_key=settings.DATA_SERVICE_SERVICE_KEY,
        )

    def for_user(self, access_token: str) -> DataServiceClient:
        """Client acting as the caller; row-level security applies."""
        return DataServiceClient(
            self._http, self._base_url, self._anon_key, access_token
        )

    def anonymous(self) -> DataServiceClient:
        return DataServiceClient(
            self._http, self._base_url, self._anon_key, self._anon_key
        )

    def elevated(self) -> DataServiceClient:
        """Service-key client. Only for cross-user administrative reads."""
        return DataServiceClient(
            self._http, self._base_url, self._service_key, self._service_key
        )

    async def verify_token(self, access_token: str) -> AuthenticatedUser:
        """Resolve a bearer token to the user it was issued for."""
        response = await self._auth_request(
            "GET",
            "/auth/v1/user",
            api_key=self._service_key,
            bearer=access_token,
        )
        if response.status_code in (401, 403):
            raise UnauthorizedError("Invalid authentication token")
        self._raise_for_status(response, "verify token")
        try:
            return AuthenticatedUser.model_validate(response.json())
        except ValueError as exc:
            raise UnauthorizedError("Invalid authentication token") from exc

    async def sign_in_with_password(self, email: str, password: str) -> TokenGrant:
        response = await self._auth_request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401):
            raise UnauthorizedError("Invalid login credentials")
        self._raise_for_status(response, "password sign-in")
        return TokenGrant.model_validate(response.json())

    async def refresh_session(self, refresh_token: str) -> TokenGrant:
        response = await self._auth_request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        if response.status_code in (400, 401):
            raise UnauthorizedError("Refresh token rejected")
        self._raise_for_status(response, "token refresh")
        return TokenGrant.model_validate(response.json())

    async def sign_out(self, access_token: str) -> None:
        response = await self._auth_request(
            "POST", "/auth/v1/logout", bearer=access_token
        )
        # 已失效的 token 登出视为成功
        if response.status_code in (401, 403, 404):
            return
        self._raise_for_status(response, "sign-out")

    async def health_check(self) -> DataServiceHealthResult:
        try:
            response = await self._http.get(
                f"{self._base_url}/rest/v1/",
                headers={"apikey": self._anon_key},
            )
        except httpx.HTTPError as exc:
            return DataServiceHealthResult(
                status=HealthStatus.ERROR, reachable=False, error=str(exc)
            )
        if response.status_code >= 500:
            return DataServiceHealthResult(
                status=HealthStatus.DEGRADED,
                reachable=True,
                status_code=response.status_code,
            )
        return DataServiceHealthResult(
            status=HealthStatus.OK,
            reachable=True,
            status_code=response.status_code,
        )

    async def _auth_request(
        self,
        method: str,
        path: str,
        *,
        api_key: str | None = None,
        bearer: str | None = None,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        headers = {"apikey": api_key or self._anon_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        try:
            return await self._http.request(
                method,
                f"{self._base_url}{path}",
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning(f"Data service auth {method} {path} failed: {exc}")
            raise DataServiceError(str(exc)) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.status_code >= 400:
            raise DataServiceError(
                f"{operation}: {response.text}", status_code=response.status_code
            )
