"""Source module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.modules.sources.application.admission import (
    SubscriptionAdmissionController,
)
from src.modules.sources.application.handlers import (
    ChangeSubscriptionHandler,
    CreateSourceHandler,
    DeleteSourceHandler,
    RemoveSubscriptionHandler,
    ToggleSubscriptionHandler,
    UpdateSourceHandler,
)
from src.modules.sources.application.query_service import SourceQueryService
from src.modules.sources.application.services import SubscriptionStatusService
from src.modules.sources.domain.repository import (
    NewsSourceRepository,
    SubscriptionRepository,
)
from src.modules.users.application.dependencies import get_user_profile_repository
from src.modules.users.domain.repository import UserProfileRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_news_source_repository() -> NewsSourceRepository:
    _missing_dependency("NewsSourceRepository")


async def get_public_news_source_repository() -> NewsSourceRepository:
    """Sources read as the caller when signed in, anonymously otherwise."""
    _missing_dependency("public NewsSourceRepository")


async def get_subscription_repository() -> SubscriptionRepository:
    _missing_dependency("SubscriptionRepository")


async def get_public_subscription_repository() -> SubscriptionRepository:
    _missing_dependency("public SubscriptionRepository")


async def get_create_source_handler(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
) -> CreateSourceHandler:
    return CreateSourceHandler(source_repository, subscription_repository)


async def get_update_source_handler(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
) -> UpdateSourceHandler:
    return UpdateSourceHandler(source_repository)


async def get_delete_source_handler(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
) -> DeleteSourceHandler:
    return DeleteSourceHandler(source_repository)


async def get_admission_controller(
    profile_repository: UserProfileRepository = Depends(get_user_profile_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
) -> SubscriptionAdmissionController:
    return SubscriptionAdmissionController(profile_repository, subscription_repository)


async def get_subscription_status_service(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
    admission: SubscriptionAdmissionController = Depends(get_admission_controller),
) -> SubscriptionStatusService:
    return SubscriptionStatusService(
        source_repository, subscription_repository, admission
    )


async def get_change_subscription_handler(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
    status_service: SubscriptionStatusService = Depends(
        get_subscription_status_service
    ),
) -> ChangeSubscriptionHandler:
    return ChangeSubscriptionHandler(
        source_repository, subscription_repository, status_service
    )


async def get_toggle_subscription_handler(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
    status_service: SubscriptionStatusService = Depends(
        get_subscription_status_service
    ),
) -> ToggleSubscriptionHandler:
    return ToggleSubscriptionHandler(
        source_repository, subscription_repository, status_service
    )


async def get_remove_subscription_handler(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
    status_service: SubscriptionStatusService = Depends(
        get_subscription_status_service
    ),
) -> RemoveSubscriptionHandler:
    return RemoveSubscriptionHandler(
        source_repository, subscription_repository, status_service
    )


async def get_source_query_service(
    source_repository: NewsSourceRepository = Depends(get_news_source_repository),
    subscription_repository: SubscriptionRepository = Depends(
        get_subscription_repository
    ),
) -> SourceQueryService:
    return SourceQueryService(source_repository, subscription_repository)


async def get_public_source_query_service(
    source_repository: NewsSourceRepository = Depends(
        get_public_news_source_repository
    ),
    subscription_repository: SubscriptionRepository = Depends(
        get_public_subscription_repository
    ),
) -> SourceQueryService:
    return SourceQueryService(source_repository, subscription_repository)
