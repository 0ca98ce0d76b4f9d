"""User profile row mappers."""

from typing import Any

from src.core.infrastructure.data_service.mapper import RowMapper
from src.modules.users.domain.entities import UserProfile


class UserProfileMapper(RowMapper[UserProfile]):
    """user_profile row mapper."""

    def to_domain(self, row: dict[str, Any]) -> UserProfile:
        return self.validate(UserProfile, row)

    def to_row(self, entity: UserProfile) -> dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "email": entity.email,
            "enable_email_delivery": entity.enable_email_delivery,
            "brief_language": entity.brief_language,
            "join_date": entity.join_date.isoformat() if entity.join_date else None,
            "pricing_plan": entity.pricing_plan,
        }
