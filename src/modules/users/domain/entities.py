"""User profile domain entities."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from src.core.domain.base_entity import BaseEntity


class PricingPlan(StrEnum):
    """订阅套餐。"""

    FREE = "Free"
    PRO = "Pro"
    MAX = "Max"


DEFAULT_BRIEF_LANGUAGE = "English"


class ProfileChanges(BaseModel):
    """用户可以自行修改的字段，其余字段（套餐、加入时间等）只读。"""

    model_config = ConfigDict(extra="ignore", strict=True)

    enable_email_delivery: bool | None = None
    brief_language: str | None = Field(default=None, min_length=1)


UPDATABLE_PROFILE_FIELDS = frozenset(ProfileChanges.model_fields)


class UserProfile(BaseEntity):
    """User profile - 用户档案。"""

    user_id: str = Field(..., description="用户ID")
    email: str | None = Field(default=None, description="邮箱")
    enable_email_delivery: bool = Field(default=False, description="是否邮件推送简报")
    brief_language: str = Field(
        default=DEFAULT_BRIEF_LANGUAGE, description="简报语言"
    )
    join_date: datetime | None = Field(default=None, description="加入时间")
    pricing_plan: str = Field(
        default=PricingPlan.FREE.value,
        description="套餐名称（保留原始值，未知值在配额计算时按 Free 处理）",
    )

    @classmethod
    def create_default(cls, user_id: str, email: str | None = None) -> "UserProfile":
        """Profile for a user signing in for the first time."""
        return cls(
            user_id=user_id,
            email=email,
            enable_email_delivery=False,
            brief_language=DEFAULT_BRIEF_LANGUAGE,
            join_date=datetime.now(UTC),
            pricing_plan=PricingPlan.FREE.value,
        )
