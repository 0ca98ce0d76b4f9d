"""Brief repository implementation."""

from src.core.domain.ports.row_store import RowStore, eq
from src.modules.briefs.domain.entities import UserBrief
from src.modules.briefs.domain.repository import BriefRepository
from src.modules.briefs.infrastructure.mappers import UserBriefMapper

TABLE = "user_brief"
COLUMNS = (
    "user_id,brief_date,brief_content,news_source_ids,"
    "brief_audio_url,brief_audio_script"
)


class DataServiceBriefRepository(BriefRepository):
    """user_brief table accessed through a row store."""

    def __init__(self, store: RowStore, mapper: UserBriefMapper):
        self.store = store
        self.mapper = mapper

    async def list_recent(self, user_id: str, limit: int) -> list[UserBrief]:
        rows = await self.store.select(
            TABLE,
            columns=COLUMNS,
            filters=[eq("user_id", user_id)],
            order=("brief_date", False),
            limit=limit,
        )
        return self.mapper.to_domain_list(rows)
