"""Source and subscription query service."""

import asyncio
from dataclasses import dataclass

from src.core.config import settings
from src.modules.sources.domain.entities import NewsSource, Subscription
from src.modules.sources.domain.repository import (
    NewsSourceRepository,
    SubscriptionRepository,
)


@dataclass(frozen=True)
class SourceListing:
    source: NewsSource
    is_subscribed: bool


@dataclass(frozen=True)
class CommunitySources:
    official: list[SourceListing]
    community: list[SourceListing]
    newly: list[SourceListing]


@dataclass(frozen=True)
class SubscriptionWithSource:
    subscription: Subscription
    news_source: NewsSource


class SourceQueryService:
    """Read-side access to news sources."""

    def __init__(
        self,
        source_repository: NewsSourceRepository,
        subscription_repository: SubscriptionRepository,
    ):
        self.source_repository = source_repository
        self.subscription_repository = subscription_repository

    async def list_owned(self, user_id: str) -> list[NewsSource]:
        return await self.source_repository.list_owned_by(user_id)

    async def list_community(self, user_id: str | None) -> CommunitySources:
        """Public activated sources split into official / community / newest.

        official 包含无主（平台所有）的源和官方账号的源；未配置官方账号时
        只有无主的源归入 official。
        """
        official_user_id = settings.OFFICIAL_USER_ID
        official, community, newly = await asyncio.gather(
            self.source_repository.list_platform_public(official_user_id),
            self.source_repository.list_community_public(official_user_id),
            self.source_repository.list_newest_public(settings.NEWLY_SOURCES_LIMIT),
        )

        subscribed: set[str] = set()
        if user_id:
            source_ids = list(
                dict.fromkeys(source.id for source in [*official, *community, *newly])
            )
            subscribed = await self.subscription_repository.active_source_ids(
                user_id, source_ids
            )

        def annotate(sources: list[NewsSource]) -> list[SourceListing]:
            return [
                SourceListing(source=source, is_subscribed=source.id in subscribed)
                for source in sources
            ]

        return CommunitySources(
            official=annotate(official),
            community=annotate(community),
            newly=annotate(newly),
        )

    async def list_active_subscriptions(
        self, user_id: str
    ) -> list[SubscriptionWithSource]:
        """Active subscriptions joined with their source.

        订阅行对应的新闻源已删除时跳过该行。
        """
        subscriptions = await self.subscription_repository.list_active(user_id)
        if not subscriptions:
            return []

        sources = await self.source_repository.list_by_ids(
            [sub.news_source_id for sub in subscriptions]
        )
        by_id = {source.id: source for source in sources}
        return [
            SubscriptionWithSource(
                subscription=sub, news_source=by_id[sub.news_source_id]
            )
            for sub in subscriptions
            if sub.news_source_id in by_id
        ]
