"""Client-side session cache.

缓存当前会话，避免每次 API 调用都向数据服务确认登录状态：

- 缓存条目在 ``ttl_sec`` 内且 token 距过期超过 ``margin_sec`` 时直接返回
- 否则发起一次获取（并发调用共享同一个进行中的请求），超时上限 ``fetch_timeout_sec``
- 获取失败或超时时回退到仍可用的旧会话，否则视为未登录

所有写入（获取结果、认证事件、主动失效）都从同一个递增序列取号，
较旧的获取结果不会覆盖较新的状态。
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.auth.domain.entities import AuthEvent, Session
from src.modules.auth.domain.ports import SessionFetchError, SessionProvider


class CacheState(StrEnum):
    EMPTY = "empty"
    FETCHING = "fetching"
    VALID = "valid"
    INVALID = "invalid"
    STALE_FALLBACK = "stale_fallback"


@dataclass(frozen=True)
class SessionCacheEntry:
    session: Session | None
    fetched_at: float
    valid_at_fetch: bool
    ticket: int


class SessionCache:
    """Caches the current session in front of a ``SessionProvider``."""

    def __init__(
        self,
        provider: SessionProvider,
        *,
        clock: Callable[[], float] = time.time,
        ttl_sec: float = settings.SESSION_CACHE_TTL_SEC,
        margin_sec: float = settings.SESSION_EXPIRY_MARGIN_SEC,
        fetch_timeout_sec: float = settings.SESSION_FETCH_TIMEOUT_SEC,
    ) -> None:
        self._provider = provider
        self._clock = clock
        self._ttl_sec = ttl_sec
        self._margin_sec = margin_sec
        self._fetch_timeout_sec = fetch_timeout_sec

        self._entry: SessionCacheEntry | None = None
        self._state = CacheState.EMPTY
        self._sequence = 0
        # 最近一次失效的序号，更早开始的获取结果一律丢弃
        self._floor = 0
        self._inflight: asyncio.Task[Session | None] | None = None

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def entry(self) -> SessionCacheEntry | None:
        return self._entry

    async def get_valid_session(self) -> Session | None:
        """Return a usable session, fetching only when the cached one is not."""
        now = self._clock()
        entry = self._entry
        if entry is not None and now - entry.fetched_at <= self._ttl_sec:
            if entry.session is None or self._usable(entry.session, now):
                return entry.session

        try:
            return await self._fetch()
        except (SessionFetchError, TimeoutError) as exc:
            fallback = self._stale_fallback()
            reason = "timeout" if isinstance(exc, TimeoutError) else str(exc)
            BusinessEvents.session_fetch_failed(
                reason=reason, fallback_used=fallback is not None
            )
            if fallback is not None:
                self._state = CacheState.STALE_FALLBACK
            else:
                self._state = CacheState.INVALID
            return fallback

    async def prime(self) -> Session | None:
        """Fetch unconditionally.

        Raises:
            SessionFetchError: the provider failed or did not answer in time
        """
        try:
            return await self._fetch()
        except TimeoutError as exc:
            raise SessionFetchError("session fetch timed out") from exc

    def invalidate(self) -> None:
        self._clear(self._next_ticket())

    def handle_auth_event(self, event: AuthEvent, session: Session | None) -> None:
        """Apply an auth-state notification from the provider."""
        ticket = self._next_ticket()
        if event == AuthEvent.SIGNED_OUT or session is None:
            self._clear(ticket)
            return
        self._store(session, ticket)
        self._inflight = None
        logger.debug(f"Session cache updated by {event}")

    def _next_ticket(self) -> int:
        self._sequence += 1
        return self._sequence

    def _usable(self, session: Session, now: float) -> bool:
        return session.is_valid(now, self._margin_sec)

    def _stale_fallback(self) -> Session | None:
        entry = self._entry
        if entry is None or entry.session is None:
            return None
        if self._usable(entry.session, self._clock()):
            return entry.session
        return None

    def _clear(self, ticket: int) -> None:
        self._entry = None
        self._floor = ticket
        self._state = CacheState.EMPTY
        # 之前发起的获取结果会被丢弃，之后的调用必须重新获取
        self._inflight = None

    def _store(self, session: Session | None, ticket: int) -> None:
        now = self._clock()
        valid = session is not None and self._usable(session, now)
        self._entry = SessionCacheEntry(
            session=session, fetched_at=now, valid_at_fetch=valid, ticket=ticket
        )
        self._state = CacheState.VALID if valid else CacheState.INVALID

    async def _fetch(self) -> Session | None:
        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._run_fetch(self._next_ticket()))
            task.add_done_callback(_retrieve_exception)
            self._inflight = task
            self._state = CacheState.FETCHING
        return await asyncio.wait_for(
            asyncio.shield(task), timeout=self._fetch_timeout_sec
        )

    async def _run_fetch(self, ticket: int) -> Session | None:
        try:
            session = await self._provider.fetch_session()
        finally:
            if self._inflight is asyncio.current_task():
                self._inflight = None

        current = self._entry
        if ticket < self._floor or (current is not None and current.ticket > ticket):
            logger.debug(f"Discarding session fetch #{ticket}, superseded")
            return current.session if current is not None else None

        self._store(session, ticket)
        return session


def _retrieve_exception(task: asyncio.Future[Session | None]) -> None:
    # 等待方超时后获取任务仍可能失败，这里读取异常避免 asyncio 报告未处理
    if not task.cancelled():
        task.exception()
