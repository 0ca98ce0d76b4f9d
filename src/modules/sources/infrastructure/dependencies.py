"""Source module dependencies."""

from fastapi import Depends

from src.core.infrastructure.data_service.client import DataServiceClient
from src.core.infrastructure.data_service.dependencies import (
    get_public_data_client,
    get_user_data_client,
)
from src.modules.sources.infrastructure.mappers import (
    NewsSourceMapper,
    SubscriptionMapper,
)
from src.modules.sources.infrastructure.repositories import (
    DataServiceNewsSourceRepository,
    DataServiceSubscriptionRepository,
)


def get_news_source_mapper() -> NewsSourceMapper:
    return NewsSourceMapper()


def get_subscription_mapper() -> SubscriptionMapper:
    return SubscriptionMapper()


async def get_news_source_repository(
    client: DataServiceClient = Depends(get_user_data_client),
    mapper: NewsSourceMapper = Depends(get_news_source_mapper),
) -> DataServiceNewsSourceRepository:
    return DataServiceNewsSourceRepository(client, mapper)


async def get_public_news_source_repository(
    client: DataServiceClient = Depends(get_public_data_client),
    mapper: NewsSourceMapper = Depends(get_news_source_mapper),
) -> DataServiceNewsSourceRepository:
    return DataServiceNewsSourceRepository(client, mapper)


async def get_subscription_repository(
    client: DataServiceClient = Depends(get_user_data_client),
    mapper: SubscriptionMapper = Depends(get_subscription_mapper),
) -> DataServiceSubscriptionRepository:
    return DataServiceSubscriptionRepository(client, mapper)


async def get_public_subscription_repository(
    client: DataServiceClient = Depends(get_public_data_client),
    mapper: SubscriptionMapper = Depends(get_subscription_mapper),
) -> DataServiceSubscriptionRepository:
    return DataServiceSubscriptionRepository(client, mapper)
