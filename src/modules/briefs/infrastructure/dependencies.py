"""Brief module dependencies."""

from fastapi import Depends

from src.core.infrastructure.data_service.client import DataServiceClient
from src.core.infrastructure.data_service.dependencies import (
    get_elevated_data_client,
    get_user_data_client,
)
from src.modules.briefs.infrastructure.mappers import UserBriefMapper
from src.modules.briefs.infrastructure.repositories import DataServiceBriefRepository


def get_user_brief_mapper() -> UserBriefMapper:
    return UserBriefMapper()


async def get_brief_repository(
    client: DataServiceClient = Depends(get_user_data_client),
    mapper: UserBriefMapper = Depends(get_user_brief_mapper),
) -> DataServiceBriefRepository:
    return DataServiceBriefRepository(client, mapper)


async def get_official_brief_repository(
    client: DataServiceClient = Depends(get_elevated_data_client),
    mapper: UserBriefMapper = Depends(get_user_brief_mapper),
) -> DataServiceBriefRepository:
    return DataServiceBriefRepository(client, mapper)
