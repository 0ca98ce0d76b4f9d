"""News source and subscription repository interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from src.modules.sources.domain.entities import (
    NewsSource,
    NewsSourceDraft,
    Subscription,
    SubscriptionStatus,
)


class NewsSourceRepository(ABC):
    """News source and subscription repository interfaces."""

    @abstractmethod
    async def get_by_id(self, source_id: str) -> NewsSource | None:
        """Get source by id."""
        pass

    @abstractmethod
    async def list_by_ids(self, source_ids: Sequence[str]) -> list[NewsSource]:
        pass

    @abstractmethod
    async def list_owned_by(self, user_id: str) -> list[NewsSource]:
        """Sources created by a user, newest first."""
        pass

    @abstractmethod
    async def list_platform_public(
        self, official_user_id: str | None
    ) -> list[NewsSource]:
        """Public activated sources without an owner or owned by the official
        account, most subscribed first."""
        pass

    @abstractmethod
    async def list_community_public(
        self, official_user_id: str | None
    ) -> list[NewsSource]:
        """Public activated sources owned by other users, most subscribed first."""
        pass

    @abstractmethod
    async def list_newest_public(self, limit: int) -> list[NewsSource]:
        """Public activated sources, newest first."""
        pass

    @abstractmethod
    async def create(self, owner_id: str, draft: NewsSourceDraft) -> NewsSource:
        """Insert an activated source owned by ``owner_id`` with one subscriber."""
        pass

    @abstractmethod
    async def update_owned(
        self, source_id: str, owner_id: str, values: dict[str, Any]
    ) -> bool:
        """Update a source owned by ``owner_id``; False when nothing matched."""
        pass

    @abstractmethod
    async def delete_owned(self, source_id: str, owner_id: str) -> bool:
        """Delete a source owned by ``owner_id``; False when nothing matched."""
        pass

    @abstractmethod
    async def set_subscriber_count(self, source_id: str, count: int) -> None:
        pass


class SubscriptionRepository(ABC):
    """Subscription repository interface."""

    @abstractmethod
    async def get(self, user_id: str, news_source_id: str) -> Subscription | None:
        pass

    @abstractmethod
    async def list_active(self, user_id: str) -> list[Subscription]:
        """Rows with status Subscribed."""
        pass

    @abstractmethod
    async def count_active(self, user_id: str) -> int:
        pass

    @abstractmethod
    async def active_source_ids(
        self, user_id: str, news_source_ids: Sequence[str]
    ) -> set[str]:
        """Subset of ``news_source_ids`` the user is subscribed to."""
        pass

    @abstractmethod
    async def save_status(
        self,
        user_id: str,
        news_source_id: str,
        status: SubscriptionStatus,
        *,
        exists: bool,
    ) -> None:
        """Update the existing row, or insert one when ``exists`` is False."""
        pass

    @abstractmethod
    async def delete(self, user_id: str, news_source_id: str) -> Subscription | None:
        """Delete the row and return it; None when there was none."""
        pass
