"""User profile repository implementation."""

from typing import Any

from src.core.domain.ports.row_store import RowStore, eq
from src.modules.users.domain.entities import UserProfile
from src.modules.users.domain.repository import UserProfileRepository
from src.modules.users.infrastructure.mappers import UserProfileMapper

TABLE = "user_profile"


class DataServiceUserProfileRepository(UserProfileRepository):
    """user_profile table accessed through the caller's row store."""

    def __init__(self, store: RowStore, mapper: UserProfileMapper):
        self.store = store
        self.mapper = mapper

    async def get_by_user_id(self, user_id: str) -> UserProfile | None:
        row = await self.store.select_one(TABLE, filters=[eq("user_id", user_id)])
        return self.mapper.to_domain(row) if row else None

    async def get_pricing_plan(self, user_id: str) -> str | None:
        row = await self.store.select_one(
            TABLE, columns="pricing_plan", filters=[eq("user_id", user_id)]
        )
        if not row:
            return None
        return row.get("pricing_plan")

    async def create(self, profile: UserProfile) -> UserProfile:
        row = await self.store.insert(TABLE, self.mapper.to_row(profile))
        return self.mapper.to_domain(row)

    async def update_fields(
        self, user_id: str, values: dict[str, Any]
    ) -> UserProfile | None:
        rows = await self.store.update(TABLE, values, [eq("user_id", user_id)])
        return self.mapper.to_domain(rows[0]) if rows else None
