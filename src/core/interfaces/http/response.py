"""Standard API response models."""

from typing import Any

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Acknowledgement for writes that return no resource."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Error response model: ``{"error": {"code", "message", "details"?}}``."""

    error: dict[str, Any]

    @classmethod
    def create(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "ErrorResponse":
        error_dict: dict[str, Any] = {"code": code, "message": message}
        if details:
            error_dict["details"] = details
        return cls(error=error_dict)
