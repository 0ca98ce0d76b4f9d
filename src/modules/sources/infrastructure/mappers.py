"""Source and subscription row mappers."""

from typing import Any

from src.core.infrastructure.data_service.mapper import RowMapper
from src.modules.sources.domain.entities import NewsSource, Subscription


class NewsSourceMapper(RowMapper[NewsSource]):
    """news_source row mapper."""

    def to_domain(self, row: dict[str, Any]) -> NewsSource:
        return self.validate(NewsSource, row)

    def to_row(self, entity: NewsSource) -> dict[str, Any]:
        return entity.model_dump(mode="json", exclude={"id", "created_at"})


class SubscriptionMapper(RowMapper[Subscription]):
    """user_subscription row mapper."""

    def to_domain(self, row: dict[str, Any]) -> Subscription:
        return self.validate(Subscription, row)

    def to_row(self, entity: Subscription) -> dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "news_source_id": entity.news_source_id,
            "status": entity.status,
        }
