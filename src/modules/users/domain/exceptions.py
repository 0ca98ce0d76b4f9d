"""User profile domain exceptions."""

from src.core.domain.exceptions import EntityNotFoundError


class ProfileNotFoundError(EntityNotFoundError):
    """Raised when the caller has no profile row."""

    def __init__(self, user_id: str | None = None):
        super().__init__("User profile", user_id)
