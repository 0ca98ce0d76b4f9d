"""User profile API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserProfileResponse(BaseModel):
    """User profile response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(..., description="用户ID")
    email: str | None = Field(None, description="邮箱")
    enable_email_delivery: bool = Field(..., description="是否邮件推送简报")
    brief_language: str = Field(..., description="简报语言")
    join_date: datetime | None = Field(None, description="加入时间")
    pricing_plan: str = Field(..., description="套餐")
