"""Subscription quota policy.

套餐与订阅上限的对应关系由策略决定，不存储在数据中。
"""

from types import MappingProxyType

from src.modules.users.domain.entities import PricingPlan

PLAN_QUOTAS = MappingProxyType(
    {
        PricingPlan.FREE: 5,
        PricingPlan.PRO: 30,
        PricingPlan.MAX: 50,
    }
)


def resolve_plan(raw_plan: str | None) -> PricingPlan:
    """Map a stored plan name to a known plan; anything unknown is Free."""
    if not raw_plan:
        return PricingPlan.FREE
    try:
        return PricingPlan(raw_plan)
    except ValueError:
        return PricingPlan.FREE


def quota_for(plan: PricingPlan) -> int:
    return PLAN_QUOTAS.get(plan, PLAN_QUOTAS[PricingPlan.FREE])
