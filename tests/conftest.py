"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（内存 fake，不依赖外部服务）
- api/: 路由测试（ASGITransport + 依赖覆盖）

使用方法：
    # 运行所有测试
    uv run pytest

    # 只运行单元测试
    uv run pytest tests/unit/
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from src.core.infrastructure.data_service import DataServiceError
from src.modules.briefs.domain.entities import UserBrief
from src.modules.briefs.domain.repository import BriefRepository
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
from src.modules.users.domain.entities import UserProfile
from src.modules.users.domain.repository import UserProfileRepository


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================
# 内存 Repository
# ============================================


class InMemoryUserProfileRepository(UserProfileRepository):
    def __init__(self) -> None:
        self.profiles: dict[str, UserProfile] = {}
        self.fail_reads = False

    def add(self, user_id: str, **values: Any) -> UserProfile:
        profile = UserProfile(user_id=user_id, **values)
        self.profiles[user_id] = profile
        return profile

    async def get_by_user_id(self, user_id: str) -> UserProfile | None:
        if self.fail_reads:
            raise DataServiceError("profile read failed", status_code=503)
        return self.profiles.get(user_id)

    async def get_pricing_plan(self, user_id: str) -> str | None:
        profile = await self.get_by_user_id(user_id)
        return profile.pricing_plan if profile else None

    async def create(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.user_id] = profile
        return profile

    async def update_fields(
        self, user_id: str, values: dict[str, Any]
    ) -> UserProfile | None:
        profile = self.profiles.get(user_id)
        if profile is None:
            return None
        updated = profile.model_copy(update=values)
        self.profiles[user_id] = updated
        return updated


class InMemoryNewsSourceRepository(NewsSourceRepository):
    def __init__(self) -> None:
        self.sources: dict[str, NewsSource] = {}
        self.fail_counter_writes = False
        self._next_id = 100
        self._clock = datetime(2025, 1, 1, tzinfo=UTC)

    def add(self, source_id: str, **values: Any) -> NewsSource:
        self._clock += timedelta(minutes=1)
        values.setdefault("title", f"Source {source_id}")
        values.setdefault("is_public", True)
        values.setdefault("status", SourceStatus.ACTIVATED.value)
        values.setdefault("created_at", self._clock)
        source = NewsSource(id=source_id, **values)
        self.sources[source_id] = source
        return source

    def _public(self) -> list[NewsSource]:
        return [
            source
            for source in self.sources.values()
            if source.is_public and source.status == SourceStatus.ACTIVATED
        ]

    async def get_by_id(self, source_id: str) -> NewsSource | None:
        return self.sources.get(source_id)

    async def list_by_ids(self, source_ids: Sequence[str]) -> list[NewsSource]:
        return [self.sources[sid] for sid in source_ids if sid in self.sources]

    async def list_owned_by(self, user_id: str) -> list[NewsSource]:
        owned = [s for s in self.sources.values() if s.user_id == user_id]
        return sorted(owned, key=lambda s: s.created_at, reverse=True)

    async def list_platform_public(
        self, official_user_id: str | None
    ) -> list[NewsSource]:
        owners = {None, official_user_id}
        sources = [s for s in self._public() if s.user_id in owners]
        return sorted(sources, key=lambda s: s.subscribers_num, reverse=True)

    async def list_community_public(
        self, official_user_id: str | None
    ) -> list[NewsSource]:
        sources = [
            s
            for s in self._public()
            if s.user_id is not None and s.user_id != official_user_id
        ]
        return sorted(sources, key=lambda s: s.subscribers_num, reverse=True)

    async def list_newest_public(self, limit: int) -> list[NewsSource]:
        return sorted(self._public(), key=lambda s: s.created_at, reverse=True)[
            :limit
        ]

    async def create(self, owner_id: str, draft: NewsSourceDraft) -> NewsSource:
        self._next_id += 1
        return self.add(
            str(self._next_id),
            **draft.model_dump(),
            user_id=owner_id,
            subscribers_num=1,
        )

    async def update_owned(
        self, source_id: str, owner_id: str, values: dict[str, Any]
    ) -> bool:
        source = self.sources.get(source_id)
        if source is None or source.user_id != owner_id:
            return False
        self.sources[source_id] = source.model_copy(update=values)
        return True

    async def delete_owned(self, source_id: str, owner_id: str) -> bool:
        source = self.sources.get(source_id)
        if source is None or source.user_id != owner_id:
            return False
        del self.sources[source_id]
        return True

    async def set_subscriber_count(self, source_id: str, count: int) -> None:
        if self.fail_counter_writes:
            raise DataServiceError("counter update failed", status_code=500)
        source = self.sources[source_id]
        self.sources[source_id] = source.model_copy(update={"subscribers_num": count})


class InMemorySubscriptionRepository(SubscriptionRepository):
    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], Subscription] = {}
        self.fail_count = False
        self.fail_writes = False

    def add(self, user_id: str, source_id: str, status: SubscriptionStatus) -> None:
        self.rows[(user_id, source_id)] = Subscription(
            user_id=user_id, news_source_id=source_id, status=status.value
        )

    def status_of(self, user_id: str, source_id: str) -> str | None:
        row = self.rows.get((user_id, source_id))
        return row.status if row else None

    async def get(self, user_id: str, news_source_id: str) -> Subscription | None:
        return self.rows.get((user_id, news_source_id))

    async def list_active(self, user_id: str) -> list[Subscription]:
        return [
            row
            for (uid, _), row in self.rows.items()
            if uid == user_id and row.is_active
        ]

    async def count_active(self, user_id: str) -> int:
        if self.fail_count:
            raise DataServiceError("count failed", status_code=500)
        return len(await self.list_active(user_id))

    async def active_source_ids(
        self, user_id: str, news_source_ids: Sequence[str]
    ) -> set[str]:
        return {
            sid
            for sid in news_source_ids
            if (row := self.rows.get((user_id, sid))) is not None and row.is_active
        }

    async def save_status(
        self,
        user_id: str,
        news_source_id: str,
        status: SubscriptionStatus,
        *,
        exists: bool,
    ) -> None:
        if self.fail_writes:
            raise DataServiceError("subscription write failed", status_code=500)
        self.add(user_id, news_source_id, status)

    async def delete(self, user_id: str, news_source_id: str) -> Subscription | None:
        return self.rows.pop((user_id, news_source_id), None)


class InMemoryBriefRepository(BriefRepository):
    def __init__(self) -> None:
        self.briefs: list[UserBrief] = []
        self.requested_limits: list[int] = []

    def add(self, user_id: str, brief_date: str, **values: Any) -> UserBrief:
        brief = UserBrief(user_id=user_id, brief_date=brief_date, **values)
        self.briefs.append(brief)
        return brief

    async def list_recent(self, user_id: str, limit: int) -> list[UserBrief]:
        self.requested_limits.append(limit)
        own = [b for b in self.briefs if b.user_id == user_id]
        return sorted(own, key=lambda b: b.brief_date, reverse=True)[:limit]


# ============================================
# Repository Fixtures
# ============================================


@pytest.fixture
def profile_repository() -> InMemoryUserProfileRepository:
    return InMemoryUserProfileRepository()


@pytest.fixture
def source_repository() -> InMemoryNewsSourceRepository:
    return InMemoryNewsSourceRepository()


@pytest.fixture
def subscription_repository() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


@pytest.fixture
def brief_repository() -> InMemoryBriefRepository:
    return InMemoryBriefRepository()


@pytest.fixture
def official_brief_repository() -> InMemoryBriefRepository:
    return InMemoryBriefRepository()
