"""Typed client for the briefing backend.

每次调用先从 ``SessionCache`` 取 token；401 或无会话时清空缓存并抛出
``SignInRequiredError``，由调用方引导重新登录。
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from src.client.exceptions import (
    ApiClientError,
    SignInRequiredError,
    SubscriptionLimitError,
)
from src.core.config import settings
from src.modules.auth.application.session_cache import SessionCache
from src.modules.briefs.interfaces.schemas import BriefResponse
from src.modules.sources.interfaces.schemas import (
    CommunitySourcesResponse,
    NewsSourceResponse,
    SubscribeResponse,
    SubscriptionItemResponse,
    ToggleSubscriptionResponse,
)
from src.modules.users.interfaces.schemas import UserProfileResponse


class BriefingApiClient:
    """One coroutine per backend route."""

    def __init__(
        self,
        base_url: str,
        session_cache: SessionCache,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session_cache = session_cache
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=settings.DATA_SERVICE_TIMEOUT_SEC
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> BriefingApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Briefs
    # ------------------------------------------------------------------

    async def list_briefs(self) -> list[BriefResponse]:
        payload = await self._request("GET", "/briefs")
        return [BriefResponse.model_validate(item) for item in payload]

    # ------------------------------------------------------------------
    # Community
    # ------------------------------------------------------------------

    async def get_community_sources(self) -> CommunitySourcesResponse:
        """Public listing; sent with a token when one is available."""
        payload = await self._request("GET", "/community/sources", auth_required=False)
        return CommunitySourcesResponse.model_validate(payload)

    async def subscribe(self, source_id: str) -> SubscribeResponse:
        return await self._change_subscription(source_id, "subscribe")

    async def unsubscribe(self, source_id: str) -> SubscribeResponse:
        return await self._change_subscription(source_id, "unsubscribe")

    async def _change_subscription(
        self, source_id: str, action: str
    ) -> SubscribeResponse:
        payload = await self._request(
            "POST",
            "/community/subscribe",
            json={"sourceId": source_id, "action": action},
        )
        return SubscribeResponse.model_validate(payload)

    # ------------------------------------------------------------------
    # Owned sources
    # ------------------------------------------------------------------

    async def list_my_sources(self) -> list[NewsSourceResponse]:
        payload = await self._request("GET", "/profile/sources")
        return [NewsSourceResponse.model_validate(item) for item in payload]

    async def create_source(self, data: dict[str, Any]) -> NewsSourceResponse:
        payload = await self._request(
            "POST",
            "/profile/sources",
            json={"action": "create", "newsSourceData": data},
        )
        return NewsSourceResponse.model_validate(payload)

    async def update_source(self, source_id: str, updates: dict[str, Any]) -> None:
        await self._request(
            "POST",
            "/profile/sources",
            json={"action": "update", "sourceId": source_id, "updates": updates},
        )

    async def delete_source(self, source_id: str) -> None:
        await self._request(
            "POST",
            "/profile/sources",
            json={"action": "delete", "sourceId": source_id},
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def list_subscriptions(self) -> list[SubscriptionItemResponse]:
        payload = await self._request("GET", "/profile/subscriptions")
        return [SubscriptionItemResponse.model_validate(item) for item in payload]

    async def toggle_subscription(
        self, news_source_id: str
    ) -> ToggleSubscriptionResponse:
        payload = await self._request(
            "POST",
            "/profile/subscriptions",
            json={"action": "toggle", "newsSourceId": news_source_id},
        )
        return ToggleSubscriptionResponse.model_validate(payload)

    async def remove_subscription(self, news_source_id: str) -> None:
        await self._request(
            "POST",
            "/profile/subscriptions",
            json={"action": "remove", "newsSourceId": news_source_id},
        )

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self) -> UserProfileResponse:
        payload = await self._request("GET", "/profile/user")
        return UserProfileResponse.model_validate(payload)

    async def update_profile(self, updates: dict[str, Any]) -> UserProfileResponse:
        payload = await self._request("POST", "/profile/user", json=updates)
        return UserProfileResponse.model_validate(payload)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        auth_required: bool = True,
    ) -> Any:
        session = await self._session_cache.get_valid_session()
        if session is None and auth_required:
            self._session_cache.invalidate()
            raise SignInRequiredError()

        headers = {"Accept": "application/json"}
        if session is not None:
            headers["Authorization"] = f"Bearer {session.access_token}"

        try:
            response = await self._http.request(
                method, f"{self._base_url}{path}", json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.warning(f"API {method} {path} failed: {exc}")
            raise ApiClientError(f"Request failed: {exc}") from exc

        if response.status_code == 401:
            self._session_cache.invalidate()
            raise SignInRequiredError()
        if response.status_code >= 400:
            raise self._error_from_response(response)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from_response(response: httpx.Response) -> ApiClientError:
        code = None
        message = f"Request failed with status {response.status_code}"
        details: dict[str, Any] = {}
        try:
            error = response.json().get("error") or {}
        except (ValueError, AttributeError):
            error = {}
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message") or message
            details = error.get("details") or {}

        if response.status_code == 403 and code == "QUOTA_EXCEEDED":
            return SubscriptionLimitError(message, details)
        return ApiClientError(
            message, status_code=response.status_code, code=code, details=details
        )
