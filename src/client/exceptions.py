"""API client errors."""

from typing import Any


class ApiClientError(Exception):
    """Request failed; the caller may retry."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}
        super().__init__(message)


class SignInRequiredError(ApiClientError):
    """No usable session, or the backend rejected the token."""

    def __init__(self, message: str = "Please sign in"):
        super().__init__(message, status_code=401, code="UNAUTHORIZED")


class SubscriptionLimitError(ApiClientError):
    """Subscribe rejected because the plan quota is used up."""

    def __init__(self, message: str, details: dict[str, Any]):
        super().__init__(
            message, status_code=403, code="QUOTA_EXCEEDED", details=details
        )
        self.plan: str | None = details.get("plan")
        self.limit: int | None = details.get("limit")
        self.current_count: int | None = details.get("currentCount")
