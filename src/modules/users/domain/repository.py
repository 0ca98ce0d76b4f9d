"""User profile repository interface."""

from abc import ABC, abstractmethod
from typing import Any

from src.modules.users.domain.entities import UserProfile


class UserProfileRepository(ABC):
    """User profile repository interface."""

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> UserProfile | None:
        """Get the profile of a user, None when no row exists."""
        pass

    @abstractmethod
    async def get_pricing_plan(self, user_id: str) -> str | None:
        """Read only the stored plan name."""
        pass

    @abstractmethod
    async def create(self, profile: UserProfile) -> UserProfile:
        """Insert a profile row."""
        pass

    @abstractmethod
    async def update_fields(
        self, user_id: str, values: dict[str, Any]
    ) -> UserProfile | None:
        """Apply column values; None when no row matched."""
        pass
