"""News source domain exceptions."""

from typing import Any

from fastapi import status

from src.core.domain.exceptions import DomainException, EntityNotFoundError


class SourceNotFoundError(EntityNotFoundError):
    """Raised when source is not found (or not owned by the caller)."""

    def __init__(self, source_id: str | None = None):
        super().__init__("News source", source_id)


class QuotaExceededError(DomainException):
    """Raised when a subscribe action would exceed the plan quota."""

    http_status_code = status.HTTP_403_FORBIDDEN
    error_code = "QUOTA_EXCEEDED"

    def __init__(self, plan: str, limit: int, current_count: int):
        self.plan = plan
        self.limit = limit
        self.current_count = current_count
        super().__init__("Subscription limit reached")

    @property
    def details(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "currentCount": self.current_count,
            "plan": self.plan,
        }
