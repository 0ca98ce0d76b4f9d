"""Auth domain entities."""

from dataclasses import dataclass
from enum import StrEnum

from src.modules.auth.domain.token import is_token_valid, read_token_expiry


class AuthEvent(StrEnum):
    """Auth state notifications emitted by the session provider."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True)
class Session:
    """Credentials of a signed-in user."""

    access_token: str
    user_id: str
    refresh_token: str | None = None
    email: str | None = None

    @property
    def expires_at(self) -> float | None:
        return read_token_expiry(self.access_token)

    def is_valid(self, now: float, margin_sec: float) -> bool:
        return is_token_valid(self.access_token, now, margin_sec)
