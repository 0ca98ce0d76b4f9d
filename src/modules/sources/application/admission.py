"""Subscription admission control.

订阅前检查套餐配额：current_count < limit 才允许订阅。
检查与写入不在同一事务中，并发请求可能短暂超出上限（软上限）。
"""

from dataclasses import dataclass

from loguru import logger

from src.core.domain.exceptions import UpstreamFailureError
from src.core.infrastructure.logging import BusinessEvents
from src.modules.sources.domain.exceptions import QuotaExceededError
from src.modules.sources.domain.policy import quota_for, resolve_plan
from src.modules.sources.domain.repository import SubscriptionRepository
from src.modules.users.domain.entities import PricingPlan
from src.modules.users.domain.repository import UserProfileRepository


@dataclass(frozen=True)
class SubscriptionLimitCheck:
    can_subscribe: bool
    current_count: int
    limit: int
    plan: PricingPlan


class SubscriptionAdmissionController:
    """Decide whether a user may add one more active subscription."""

    def __init__(
        self,
        profile_repository: UserProfileRepository,
        subscription_repository: SubscriptionRepository,
    ):
        self.profile_repository = profile_repository
        self.subscription_repository = subscription_repository

    async def check_subscription_limit(self, user_id: str) -> SubscriptionLimitCheck:
        """Evaluate the quota at call time. Never cached, no side effects."""
        plan = await self._resolve_plan(user_id)
        limit = quota_for(plan)
        # 计数失败直接抛出，不做放行
        current_count = await self.subscription_repository.count_active(user_id)
        return SubscriptionLimitCheck(
            can_subscribe=current_count < limit,
            current_count=current_count,
            limit=limit,
            plan=plan,
        )

    async def ensure_can_subscribe(self, user_id: str) -> SubscriptionLimitCheck:
        check = await self.check_subscription_limit(user_id)
        if not check.can_subscribe:
            BusinessEvents.subscription_quota_rejected(
                user_id=user_id,
                plan=check.plan.value,
                limit=check.limit,
                current_count=check.current_count,
            )
            raise QuotaExceededError(
                plan=check.plan.value,
                limit=check.limit,
                current_count=check.current_count,
            )
        return check

    async def _resolve_plan(self, user_id: str) -> PricingPlan:
        try:
            raw_plan = await self.profile_repository.get_pricing_plan(user_id)
        except UpstreamFailureError as exc:
            logger.warning(
                f"Profile lookup failed for {user_id}, using Free quota: {exc}"
            )
            return PricingPlan.FREE
        return resolve_plan(raw_plan)
