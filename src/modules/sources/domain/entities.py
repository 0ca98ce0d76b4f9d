"""News source domain entities."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.domain.base_entity import BaseEntity


class SourceStatus(StrEnum):
    """新闻源状态，只有 Activated 的源会出现在社区列表中。"""

    ACTIVATED = "Activated"


class NewsSource(BaseEntity):
    """News source - 新闻源实体。

    ``subscribers_num`` 是冗余计数，尽力维护，不保证与订阅行数一致。
    """

    id: str = Field(..., description="源ID")
    title: str = Field(default="", description="标题")
    description: str | None = Field(default=None, description="描述")
    language: str | None = Field(default=None, description="语言")
    category: str | None = Field(default=None, description="分类")
    link: str | None = Field(default=None, description="站点链接")
    rss: str | None = Field(default=None, description="RSS 地址")
    tags: list[str] | None = Field(default=None, description="标签")
    user_id: str | None = Field(default=None, description="创建者用户ID")
    is_public: bool = Field(default=False, description="是否公开")
    subscribers_num: int = Field(default=0, description="订阅者数量")
    status: str | None = Field(default=None, description="状态")
    latest_crawled_num: int | None = Field(default=None, description="最近抓取条数")
    latest_crawled_at: datetime | None = Field(default=None, description="最近抓取时间")
    created_at: datetime | None = Field(default=None, description="创建时间")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # 数据服务可能返回整数主键
        return str(value) if isinstance(value, int) else value

    @field_validator("subscribers_num", mode="before")
    @classmethod
    def _default_count(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("is_public", mode="before")
    @classmethod
    def _default_public(cls, value: Any) -> Any:
        return False if value is None else value

    def adjusted_subscriber_count(self, delta: int) -> int:
        """Counter after applying ``delta``, never below zero."""
        return max(0, self.subscribers_num + delta)


class NewsSourceDraft(BaseModel):
    """Fields of a source about to be created by a user."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, description="标题")
    description: str | None = None
    language: str | None = None
    category: str | None = None
    link: str | None = None
    rss: str | None = None
    tags: list[str] | None = None
    is_public: bool = False


class SourceChanges(BaseModel):
    """Owner-editable source fields; everything else is dropped."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    language: str | None = None
    category: str | None = None
    link: str | None = None
    rss: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None

    def to_values(self) -> dict[str, Any]:
        values = self.model_dump(exclude_unset=True)
        # 标题和公开标记不允许清空
        for key in ("title", "is_public"):
            if key in values and values[key] is None:
                del values[key]
        return values


UPDATABLE_SOURCE_FIELDS = frozenset(SourceChanges.model_fields)


class SubscriptionStatus(StrEnum):
    """订阅状态。"""

    SUBSCRIBED = "Subscribed"
    UNSUBSCRIBED = "Unsubscribed"


class Subscription(BaseEntity):
    """User subscription - 每个 (user_id, news_source_id) 至多一行。"""

    user_id: str = Field(..., description="用户ID")
    news_source_id: str = Field(..., description="新闻源ID")
    status: str = Field(
        default=SubscriptionStatus.UNSUBSCRIBED.value, description="订阅状态"
    )

    @field_validator("news_source_id", mode="before")
    @classmethod
    def _coerce_source_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.SUBSCRIBED
