"""Brief module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.modules.briefs.application.query_service import BriefQueryService
from src.modules.briefs.domain.repository import BriefRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_brief_repository() -> BriefRepository:
    _missing_dependency("BriefRepository")


async def get_official_brief_repository() -> BriefRepository:
    """Elevated repository, used only to read the official demo brief."""
    _missing_dependency("official BriefRepository")


async def get_brief_query_service(
    brief_repository: BriefRepository = Depends(get_brief_repository),
    official_brief_repository: BriefRepository = Depends(
        get_official_brief_repository
    ),
) -> BriefQueryService:
    return BriefQueryService(brief_repository, official_brief_repository)
