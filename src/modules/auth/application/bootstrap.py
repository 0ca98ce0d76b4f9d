"""Initial session load."""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.auth.application.session_cache import SessionCache
from src.modules.auth.domain.entities import Session
from src.modules.auth.domain.ports import SessionFetchError

SignedInHook = Callable[[Session], Awaitable[object]]


class SessionBootstrap:
    """Load the session once at startup, retrying transient failures.

    首次失败后按 1s、2s 退避重试；全部失败则清空缓存，按未登录处理。
    """

    def __init__(
        self,
        cache: SessionCache,
        *,
        attempts: int = settings.SESSION_BOOTSTRAP_ATTEMPTS,
        on_signed_in: SignedInHook | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._cache = cache
        self._attempts = attempts
        self._on_signed_in = on_signed_in
        self._sleep = sleep

    async def run(self) -> Session | None:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(SessionFetchError),
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=1, min=1, max=4),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            session = await retrying(self._cache.prime)
        except SessionFetchError as exc:
            BusinessEvents.session_bootstrap_failed(
                attempts=self._attempts, error=str(exc)
            )
            self._cache.invalidate()
            return None

        if session is not None and self._on_signed_in is not None:
            try:
                await self._on_signed_in(session)
            except Exception as exc:
                logger.warning(f"Signed-in hook failed for {session.user_id}: {exc}")
        return session
