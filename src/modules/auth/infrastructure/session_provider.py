"""Session provider backed by the data service auth endpoints."""

import time
from collections.abc import Callable

from loguru import logger

from src.core.config import settings
from src.core.domain.exceptions import UnauthorizedError
from src.core.infrastructure.data_service import (
    DataServiceError,
    DataServiceGateway,
    TokenGrant,
)
from src.core.infrastructure.logging import BusinessEvents
from src.modules.auth.domain.entities import AuthEvent, Session
from src.modules.auth.domain.ports import AuthStateListener, SessionFetchError


def _session_from_grant(grant: TokenGrant) -> Session:
    return Session(
        access_token=grant.access_token,
        user_id=grant.user.id,
        refresh_token=grant.refresh_token,
        email=grant.user.email,
    )


class DataServiceSessionProvider:
    """Holds the signed-in user's tokens and refreshes them when needed."""

    def __init__(
        self,
        gateway: DataServiceGateway,
        *,
        clock: Callable[[], float] = time.time,
        margin_sec: float = settings.SESSION_EXPIRY_MARGIN_SEC,
    ) -> None:
        self._gateway = gateway
        self._clock = clock
        self._margin_sec = margin_sec
        self._session: Session | None = None
        self._listeners: list[AuthStateListener] = []

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        """Register a listener; the returned callable removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        try:
            grant = await self._gateway.sign_in_with_password(email, password)
        except DataServiceError as exc:
            raise SessionFetchError(str(exc)) from exc
        session = _session_from_grant(grant)
        self._session = session
        self._emit(AuthEvent.SIGNED_IN, session)
        return session

    async def sign_out(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            try:
                await self._gateway.sign_out(session.access_token)
            except DataServiceError as exc:
                logger.warning(f"Remote sign-out failed, local session cleared: {exc}")
        self._emit(AuthEvent.SIGNED_OUT, None)

    async def fetch_session(self) -> Session | None:
        session = self._session
        if session is None:
            return None
        if session.is_valid(self._clock(), self._margin_sec):
            return session
        if not session.refresh_token:
            return session

        try:
            grant = await self._gateway.refresh_session(session.refresh_token)
        except UnauthorizedError:
            logger.info(f"Refresh token rejected for {session.user_id}, signing out")
            self._session = None
            self._emit(AuthEvent.SIGNED_OUT, None)
            return None
        except DataServiceError as exc:
            raise SessionFetchError(str(exc)) from exc

        refreshed = _session_from_grant(grant)
        self._session = refreshed
        BusinessEvents.session_refreshed(user_id=refreshed.user_id)
        self._emit(AuthEvent.TOKEN_REFRESHED, refreshed)
        return refreshed

    def _emit(self, event: AuthEvent, session: Session | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)
