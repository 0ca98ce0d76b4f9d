"""Application-level security dependencies.

Defines auth dependencies without importing infrastructure.
The actual implementations are injected via FastAPI dependency_overrides in main.py.
"""

from dataclasses import dataclass
from typing import NoReturn


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


@dataclass(frozen=True)
class AuthContext:
    """Authentication context for the current request."""

    user_id: str
    access_token: str
    email: str | None = None


async def get_current_auth() -> AuthContext:
    """Get the current auth context; raises 401 when the bearer token is missing or invalid."""
    _missing_dependency("get_current_auth")


async def get_optional_auth() -> AuthContext | None:
    """Get the auth context if a bearer token was sent.

    No header means anonymous (None); a header that fails verification is still a 401.
    """
    _missing_dependency("get_optional_auth")
