"""Auth ports."""

from collections.abc import Callable
from typing import Protocol

from src.modules.auth.domain.entities import AuthEvent, Session


class SessionFetchError(Exception):
    """The session provider could not be reached or returned an error."""


AuthStateListener = Callable[[AuthEvent, Session | None], None]


class SessionProvider(Protocol):
    """Source of truth for the current session."""

    async def fetch_session(self) -> Session | None:
        """Current session, None when signed out.

        Raises:
            SessionFetchError when the provider cannot answer.
        """
        ...
