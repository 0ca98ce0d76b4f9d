"""Source and subscription API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.modules.sources.application.commands import SubscribeAction


def _coerce_id(value: Any) -> Any:
    # 前端可能以数字形式传递ID
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class NewsSourceResponse(BaseModel):
    """News source response."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(..., description="源ID")
    title: str = Field(..., description="标题")
    description: str | None = Field(None, description="描述")
    language: str | None = Field(None, description="语言")
    category: str | None = Field(None, description="分类")
    link: str | None = Field(None, description="站点链接")
    rss: str | None = Field(None, description="RSS 地址")
    tags: list[str] | None = Field(None, description="标签")
    user_id: str | None = Field(None, description="创建者用户ID")
    is_public: bool = Field(..., description="是否公开")
    subscribers_num: int = Field(..., description="订阅者数量")
    status: str | None = Field(None, description="状态")
    latest_crawled_num: int | None = Field(None, description="最近抓取条数")
    latest_crawled_at: datetime | None = Field(None, description="最近抓取时间")
    created_at: datetime | None = Field(None, description="创建时间")


class CommunitySourceResponse(NewsSourceResponse):
    """Public source with the caller's subscription flag."""

    is_subscribed: bool = Field(False, alias="isSubscribed", description="是否已订阅")


class CommunitySourcesResponse(BaseModel):
    """Community page listing."""

    official: list[CommunitySourceResponse] = Field(default_factory=list)
    community: list[CommunitySourceResponse] = Field(default_factory=list)
    newly: list[CommunitySourceResponse] = Field(default_factory=list)


class SubscribeRequest(BaseModel):
    """Subscribe / unsubscribe request."""

    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(
        ..., min_length=1, alias="sourceId", description="新闻源ID"
    )
    action: SubscribeAction = Field(..., description="subscribe | unsubscribe")

    normalize_source_id = field_validator("source_id", mode="before")(_coerce_id)


class SubscribeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    is_subscribed: bool = Field(..., alias="isSubscribed")
    new_subscriber_count: int = Field(..., alias="newSubscriberCount")


class ManageSourceRequest(BaseModel):
    """Create / update / delete an owned source."""

    model_config = ConfigDict(populate_by_name=True)

    action: str = Field(..., min_length=1, description="create | update | delete")
    source_id: str | None = Field(None, alias="sourceId", description="新闻源ID")
    updates: dict[str, Any] | None = Field(None, description="待更新字段")
    news_source_data: dict[str, Any] | None = Field(
        None, alias="newsSourceData", description="新建源数据"
    )

    normalize_source_id = field_validator("source_id", mode="before")(_coerce_id)


class ManageSubscriptionRequest(BaseModel):
    """Toggle / remove a subscription."""

    model_config = ConfigDict(populate_by_name=True)

    news_source_id: str = Field(
        ..., min_length=1, alias="newsSourceId", description="新闻源ID"
    )
    action: str = Field(..., min_length=1, description="toggle | remove")

    normalize_news_source_id = field_validator("news_source_id", mode="before")(
        _coerce_id
    )


class ToggleSubscriptionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    new_status: str = Field(..., alias="newStatus")


class SubscriptionItemResponse(BaseModel):
    """Active subscription joined with its source."""

    user_id: str
    news_source_id: str
    status: str
    news_source: NewsSourceResponse
