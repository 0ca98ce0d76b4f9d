"""User profile module dependencies."""

from fastapi import Depends

from src.core.infrastructure.data_service.client import DataServiceClient
from src.core.infrastructure.data_service.dependencies import get_user_data_client
from src.modules.users.infrastructure.mappers import UserProfileMapper
from src.modules.users.infrastructure.repositories import (
    DataServiceUserProfileRepository,
)


def get_user_profile_mapper() -> UserProfileMapper:
    return UserProfileMapper()


async def get_user_profile_repository(
    client: DataServiceClient = Depends(get_user_data_client),
    mapper: UserProfileMapper = Depends(get_user_profile_mapper),
) -> DataServiceUserProfileRepository:
    return DataServiceUserProfileRepository(client, mapper)
