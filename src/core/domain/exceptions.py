"""Base domain exceptions.

所有领域异常都应继承自 DomainException，并可以通过定义 http_status_code 和 error_code
类属性来指定 HTTP 响应细节。需要携带结构化信息（如配额）的异常可以覆盖 details。
"""

from typing import Any

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors.

    子类可以通过定义以下类属性来自定义 HTTP 响应：
    - http_status_code: HTTP 状态码（默认 400）
    - error_code: 错误代码字符串（默认 "DOMAIN_ERROR"）
    """

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)

    @property
    def details(self) -> dict[str, Any] | None:
        return None


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        message = f"{entity_type} not found"
        if entity_id:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class BadRequestError(DomainException):
    """Raised when required input is missing or malformed."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"


class UnauthorizedError(DomainException):
    """Raised when the bearer credential is missing, invalid or expired."""

    http_status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class UpstreamFailureError(DomainException):
    """Raised when the data service fails a required read or write.

    The message returned to callers stays generic; the cause is logged.
    """

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "UPSTREAM_FAILURE"

    def __init__(self, message: str = "Upstream data service request failed"):
        super().__init__(message)


class NoValidFieldsError(BadRequestError):
    """Raised when an update carries no allow-listed field."""

    def __init__(self, message: str = "No valid fields to update"):
        super().__init__(message)
