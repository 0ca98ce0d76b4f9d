"""Brief query service."""

from dataclasses import dataclass

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.briefs.domain.entities import UserBrief
from src.modules.briefs.domain.repository import BriefRepository


@dataclass(frozen=True)
class BriefView:
    brief: UserBrief
    is_demo: bool = False


class BriefQueryService:
    """List a user's briefs, falling back to the official demo brief.

    新用户还没有简报时，返回官方账号最新的一份简报作为演示（isDemo=true）。
    官方账号的数据只能用服务密钥读取，所以使用单独的 repository。
    """

    def __init__(
        self,
        brief_repository: BriefRepository,
        official_brief_repository: BriefRepository,
    ):
        self.brief_repository = brief_repository
        self.official_brief_repository = official_brief_repository

    async def list_for_user(self, user_id: str) -> list[BriefView]:
        briefs = await self.brief_repository.list_recent(
            user_id, settings.BRIEFS_RECENT_LIMIT
        )
        if briefs:
            return [BriefView(brief=brief) for brief in briefs]

        official_user_id = settings.OFFICIAL_USER_ID
        if not official_user_id:
            logger.debug("No official account configured, skipping demo brief")
            return []

        demo = await self.official_brief_repository.list_recent(official_user_id, 1)
        if not demo:
            return []

        BusinessEvents.demo_brief_served(
            user_id=user_id, official_user_id=official_user_id
        )
        return [BriefView(brief=demo[0], is_demo=True)]
