"""Source and subscription repository implementations."""

from collections.abc import Sequence
from typing import Any

from src.core.domain.ports.row_store import (
    Filter,
    RowStore,
    any_of,
    eq,
    in_,
    neq,
    not_null,
)
from src.core.infrastructure.data_service.errors import DataServiceError
from src.modules.sources.domain.entities import (
    NewsSource,
    NewsSourceDraft,
    SourceStatus,
    Subscription,
    SubscriptionStatus,
)
from src.modules.sources.domain.repository import (
    NewsSourceRepository,
    SubscriptionRepository,
)
from src.modules.sources.infrastructure.mappers import (
    NewsSourceMapper,
    SubscriptionMapper,
)

SOURCE_TABLE = "news_source"
SUBSCRIPTION_TABLE = "user_subscription"


class DataServiceNewsSourceRepository(NewsSourceRepository):
    """news_source table accessed through a row store."""

    def __init__(self, store: RowStore, mapper: NewsSourceMapper):
        self.store = store
        self.mapper = mapper

    async def get_by_id(self, source_id: str) -> NewsSource | None:
        row = await self.store.select_one(SOURCE_TABLE, filters=[eq("id", source_id)])
        return self.mapper.to_domain(row) if row else None

    async def list_by_ids(self, source_ids: Sequence[str]) -> list[NewsSource]:
        if not source_ids:
            return []
        rows = await self.store.select(SOURCE_TABLE, filters=[in_("id", source_ids)])
        return self.mapper.to_domain_list(rows)

    async def list_owned_by(self, user_id: str) -> list[NewsSource]:
        rows = await self.store.select(
            SOURCE_TABLE,
            filters=[eq("user_id", user_id)],
            order=("created_at", False),
        )
        return self.mapper.to_domain_list(rows)

    async def list_platform_public(
        self, official_user_id: str | None
    ) -> list[NewsSource]:
        owner = eq("user_id", None)
        if official_user_id:
            owner = any_of(eq("user_id", official_user_id), owner)
        return await self._list_public_by_subscribers(owner)

    async def list_community_public(
        self, official_user_id: str | None
    ) -> list[NewsSource]:
        # neq 不匹配 NULL，无主的源不会混入社区列表
        if official_user_id:
            owner = neq("user_id", official_user_id)
        else:
            owner = not_null("user_id")
        return await self._list_public_by_subscribers(owner)

    async def _list_public_by_subscribers(self, owner: Filter) -> list[NewsSource]:
        rows = await self.store.select(
            SOURCE_TABLE,
            filters=[*self._public_filters(), owner],
            order=("subscribers_num", False),
        )
        return self.mapper.to_domain_list(rows)

    async def list_newest_public(self, limit: int) -> list[NewsSource]:
        rows = await self.store.select(
            SOURCE_TABLE,
            filters=self._public_filters(),
            order=("created_at", False),
            limit=limit,
        )
        return self.mapper.to_domain_list(rows)

    async def create(self, owner_id: str, draft: NewsSourceDraft) -> NewsSource:
        row = {
            **draft.model_dump(),
            "user_id": owner_id,
            # 创建者自动订阅
            "subscribers_num": 1,
            "status": SourceStatus.ACTIVATED.value,
        }
        created = await self.store.insert(SOURCE_TABLE, row)
        return self.mapper.to_domain(created)

    async def update_owned(
        self, source_id: str, owner_id: str, values: dict[str, Any]
    ) -> bool:
        rows = await self.store.update(
            SOURCE_TABLE, values, [eq("id", source_id), eq("user_id", owner_id)]
        )
        return bool(rows)

    async def delete_owned(self, source_id: str, owner_id: str) -> bool:
        rows = await self.store.delete(
            SOURCE_TABLE, [eq("id", source_id), eq("user_id", owner_id)]
        )
        return bool(rows)

    async def set_subscriber_count(self, source_id: str, count: int) -> None:
        rows = await self.store.update(
            SOURCE_TABLE, {"subscribers_num": count}, [eq("id", source_id)]
        )
        # 行级权限拦截时数据服务返回 200 + 空列表
        if not rows:
            raise DataServiceError(f"subscriber count of {source_id} not updated")

    @staticmethod
    def _public_filters() -> list[Filter]:
        return [eq("is_public", True), eq("status", SourceStatus.ACTIVATED.value)]


class DataServiceSubscriptionRepository(SubscriptionRepository):
    """user_subscription table accessed through the caller's row store."""

    def __init__(self, store: RowStore, mapper: SubscriptionMapper):
        self.store = store
        self.mapper = mapper

    @staticmethod
    def _key(user_id: str, news_source_id: str) -> list[Filter]:
        return [eq("user_id", user_id), eq("news_source_id", news_source_id)]

    async def get(self, user_id: str, news_source_id: str) -> Subscription | None:
        row = await self.store.select_one(
            SUBSCRIPTION_TABLE, filters=self._key(user_id, news_source_id)
        )
        return self.mapper.to_domain(row) if row else None

    async def list_active(self, user_id: str) -> list[Subscription]:
        rows = await self.store.select(
            SUBSCRIPTION_TABLE,
            columns="user_id,news_source_id,status",
            filters=[
                eq("user_id", user_id),
                eq("status", SubscriptionStatus.SUBSCRIBED.value),
            ],
        )
        return self.mapper.to_domain_list(rows)

    async def count_active(self, user_id: str) -> int:
        rows = await self.store.select(
            SUBSCRIPTION_TABLE,
            columns="news_source_id",
            filters=[
                eq("user_id", user_id),
                eq("status", SubscriptionStatus.SUBSCRIBED.value),
            ],
        )
        return len(rows)

    async def active_source_ids(
        self, user_id: str, news_source_ids: Sequence[str]
    ) -> set[str]:
        if not news_source_ids:
            return set()
        rows = await self.store.select(
            SUBSCRIPTION_TABLE,
            columns="news_source_id,status",
            filters=[eq("user_id", user_id), in_("news_source_id", news_source_ids)],
        )
        return {
            str(row["news_source_id"])
            for row in rows
            if row.get("status") == SubscriptionStatus.SUBSCRIBED.value
        }

    async def save_status(
        self,
        user_id: str,
        news_source_id: str,
        status: SubscriptionStatus,
        *,
        exists: bool,
    ) -> None:
        if exists:
            rows = await self.store.update(
                SUBSCRIPTION_TABLE,
                {"status": status.value},
                self._key(user_id, news_source_id),
            )
            if rows:
                return
            # 读取之后行被删除（或被行级权限拦截），改为插入；插入失败照常抛出
        subscription = Subscription(
            user_id=user_id, news_source_id=news_source_id, status=status.value
        )
        await self.store.insert(SUBSCRIPTION_TABLE, self.mapper.to_row(subscription))

    async def delete(self, user_id: str, news_source_id: str) -> Subscription | None:
        rows = await self.store.delete(
            SUBSCRIPTION_TABLE, self._key(user_id, news_source_id)
        )
        return self.mapper.to_domain(rows[0]) if rows else None
