"""Subscription status change service."""

from loguru import logger

from src.core.application.best_effort import run_best_effort
from src.core.infrastructure.logging import BusinessEvents
from src.modules.sources.application.admission import (
    SubscriptionAdmissionController,
)
from src.modules.sources.domain.entities import (
    NewsSource,
    Subscription,
    SubscriptionStatus,
)
from src.modules.sources.domain.repository import (
    NewsSourceRepository,
    SubscriptionRepository,
)


class SubscriptionStatusService:
    """Apply a subscription status change as a two-phase write.

    1. 订阅行写入（主写入，失败即报错）
    2. 新闻源订阅计数 ±1（次要写入，失败只记录 drift）
    """

    def __init__(
        self,
        source_repository: NewsSourceRepository,
        subscription_repository: SubscriptionRepository,
        admission: SubscriptionAdmissionController,
    ):
        self.source_repository = source_repository
        self.subscription_repository = subscription_repository
        self.admission = admission

    async def change_status(
        self,
        user_id: str,
        news_source_id: str,
        subscribe: bool,
        existing: Subscription | None,
        source: NewsSource | None,
    ) -> int | None:
        """Write the new status and adjust the counter.

        Returns the expected subscriber count, or None when the source row is
        unknown and the counter was left alone.
        """
        if subscribe:
            await self.admission.ensure_can_subscribe(user_id)
            status = SubscriptionStatus.SUBSCRIBED
        else:
            status = SubscriptionStatus.UNSUBSCRIBED
        await self.subscription_repository.save_status(
            user_id, news_source_id, status, exists=existing is not None
        )

        new_count = None
        if source is not None:
            new_count = await self.adjust_counter(source, 1 if subscribe else -1)
        BusinessEvents.subscription_changed(
            user_id=user_id,
            source_id=news_source_id,
            status=status.value,
            subscriber_count=new_count,
        )
        return new_count

    async def adjust_counter(self, source: NewsSource, delta: int) -> int:
        new_count = source.adjusted_subscriber_count(delta)
        updated = await run_best_effort(
            "adjust_subscriber_count",
            lambda: self.source_repository.set_subscriber_count(source.id, new_count),
            source_id=source.id,
            delta=delta,
        )
        if updated:
            logger.debug(f"Source {source.id} subscriber count -> {new_count}")
        return new_count
