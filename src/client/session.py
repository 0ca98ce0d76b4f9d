"""Client wiring: session provider, session cache and API client.

登录状态变化由 provider 推送给缓存；登录成功（含启动时恢复的会话）后
请求一次 ``/profile/user``，确保用户资料行已创建。
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
from loguru import logger

from src.client.api_client import BriefingApiClient
from src.client.exceptions import ApiClientError
from src.core.infrastructure.data_service import DataServiceGateway
from src.modules.auth.application.bootstrap import SessionBootstrap
from src.modules.auth.application.session_cache import SessionCache
from src.modules.auth.domain.entities import Session
from src.modules.auth.infrastructure.session_provider import (
    DataServiceSessionProvider,
)


class ClientSession:
    """Owns the signed-in state of one client process."""

    def __init__(
        self,
        provider: DataServiceSessionProvider,
        cache: SessionCache,
        api: BriefingApiClient,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.api = api
        self.bootstrap = SessionBootstrap(cache, on_signed_in=self._ensure_profile)
        self._unsubscribe: Callable[[], None] | None = provider.on_auth_state_change(
            cache.handle_auth_event
        )

    async def start(self) -> Session | None:
        """Restore the session at startup; None means signed out."""
        return await self.bootstrap.run()

    async def sign_in(self, email: str, password: str) -> Session:
        session = await self.provider.sign_in_with_password(email, password)
        await self._ensure_profile(session)
        return session

    async def sign_out(self) -> None:
        await self.provider.sign_out()

    async def aclose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.api.aclose()

    async def __aenter__(self) -> ClientSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _ensure_profile(self, session: Session) -> None:
        try:
            await self.api.get_profile()
        except ApiClientError as exc:
            logger.warning(f"Profile load failed for {session.user_id}: {exc}")


def create_client(
    base_url: str,
    gateway: DataServiceGateway,
    *,
    http: httpx.AsyncClient | None = None,
) -> ClientSession:
    """Build the provider, cache and API client and connect them."""
    provider = DataServiceSessionProvider(gateway)
    cache = SessionCache(provider)
    api = BriefingApiClient(base_url, cache, http)
    return ClientSession(provider, cache, api)
