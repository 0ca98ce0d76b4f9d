"""Brief row mappers."""

from typing import Any

from src.core.infrastructure.data_service.mapper import RowMapper
from src.modules.briefs.domain.entities import UserBrief


class UserBriefMapper(RowMapper[UserBrief]):
    """user_brief row mapper."""

    def to_domain(self, row: dict[str, Any]) -> UserBrief:
        return self.validate(UserBrief, row)

    def to_row(self, entity: UserBrief) -> dict[str, Any]:
        return entity.model_dump()
