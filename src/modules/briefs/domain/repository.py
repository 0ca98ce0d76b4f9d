"""Brief repository interface."""

from abc import ABC, abstractmethod

from src.modules.briefs.domain.entities import UserBrief


class BriefRepository(ABC):
    """Brief repository interface."""

    @abstractmethod
    async def list_recent(self, user_id: str, limit: int) -> list[UserBrief]:
        """Most recent briefs of a user, newest first."""
        pass
