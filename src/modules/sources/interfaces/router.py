"""Source and subscription API routes."""

from fastapi import APIRouter, Depends, status

from src.core.application.security import (
    AuthContext,
    get_current_auth,
    get_optional_auth,
)
from src.core.domain.exceptions import BadRequestError
from src.core.interfaces.http.response import SuccessResponse
from src.modules.sources.application.commands import (
    ChangeSubscriptionCommand,
    CreateSourceCommand,
    DeleteSourceCommand,
    RemoveSubscriptionCommand,
    ToggleSubscriptionCommand,
    UpdateSourceCommand,
)
from src.modules.sources.application.dependencies import (
    get_change_subscription_handler,
    get_create_source_handler,
    get_delete_source_handler,
    get_public_source_query_service,
    get_remove_subscription_handler,
    get_source_query_service,
    get_toggle_subscription_handler,
    get_update_source_handler,
)
from src.modules.sources.application.handlers import (
    ChangeSubscriptionHandler,
    CreateSourceHandler,
    DeleteSourceHandler,
    RemoveSubscriptionHandler,
    ToggleSubscriptionHandler,
    UpdateSourceHandler,
)
from src.modules.sources.application.query_service import (
    SourceListing,
    SourceQueryService,
)
from src.modules.sources.interfaces.schemas import (
    CommunitySourceResponse,
    CommunitySourcesResponse,
    ManageSourceRequest,
    ManageSubscriptionRequest,
    NewsSourceResponse,
    SubscribeRequest,
    SubscribeResponse,
    SubscriptionItemResponse,
    ToggleSubscriptionResponse,
)

router = APIRouter(tags=["sources"])


def _to_community_item(listing: SourceListing) -> CommunitySourceResponse:
    return CommunitySourceResponse(
        **listing.source.model_dump(), is_subscribed=listing.is_subscribed
    )


@router.get(
    "/community/sources",
    response_model=CommunitySourcesResponse,
    status_code=status.HTTP_200_OK,
    summary="社区新闻源",
    description="官方源、社区源和最新源；登录时附带订阅状态",
)
async def list_community_sources(
    auth: AuthContext | None = Depends(get_optional_auth),
    query_service: SourceQueryService = Depends(get_public_source_query_service),
) -> CommunitySourcesResponse:
    listing = await query_service.list_community(auth.user_id if auth else None)
    return CommunitySourcesResponse(
        official=[_to_community_item(item) for item in listing.official],
        community=[_to_community_item(item) for item in listing.community],
        newly=[_to_community_item(item) for item in listing.newly],
    )


@router.post(
    "/community/subscribe",
    response_model=SubscribeResponse,
    status_code=status.HTTP_200_OK,
    summary="订阅/取消订阅",
    description="订阅时检查套餐配额，超限返回 403 QUOTA_EXCEEDED",
)
async def change_subscription(
    request: SubscribeRequest,
    auth: AuthContext = Depends(get_current_auth),
    handler: ChangeSubscriptionHandler = Depends(get_change_subscription_handler),
) -> SubscribeResponse:
    result = await handler.handle(
        ChangeSubscriptionCommand(
            user_id=auth.user_id,
            source_id=request.source_id,
            action=request.action,
        )
    )
    return SubscribeResponse(
        success=True,
        is_subscribed=result.is_subscribed,
        new_subscriber_count=result.new_subscriber_count,
    )


@router.get(
    "/profile/sources",
    response_model=list[NewsSourceResponse],
    status_code=status.HTTP_200_OK,
    summary="我创建的新闻源",
)
async def list_my_sources(
    auth: AuthContext = Depends(get_current_auth),
    query_service: SourceQueryService = Depends(get_source_query_service),
) -> list[NewsSourceResponse]:
    sources = await query_service.list_owned(auth.user_id)
    return [NewsSourceResponse.model_validate(source) for source in sources]


@router.post(
    "/profile/sources",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="创建/更新/删除新闻源",
    description="create 返回新建的源；update 和 delete 返回 {success: true}",
)
async def manage_source(
    request: ManageSourceRequest,
    auth: AuthContext = Depends(get_current_auth),
    create_handler: CreateSourceHandler = Depends(get_create_source_handler),
    update_handler: UpdateSourceHandler = Depends(get_update_source_handler),
    delete_handler: DeleteSourceHandler = Depends(get_delete_source_handler),
) -> NewsSourceResponse | SuccessResponse:
    if request.action == "create":
        if request.news_source_data is None:
            raise BadRequestError("Missing newsSourceData for create action")
        source = await create_handler.handle(
            CreateSourceCommand(user_id=auth.user_id, data=request.news_source_data)
        )
        return NewsSourceResponse.model_validate(source)

    if request.action == "update":
        if not request.source_id:
            raise BadRequestError("Missing sourceId for update action")
        if request.updates is None:
            raise BadRequestError("Missing updates for update action")
        await update_handler.handle(
            UpdateSourceCommand(
                source_id=request.source_id,
                user_id=auth.user_id,
                updates=request.updates,
            )
        )
        return SuccessResponse()

    if request.action == "delete":
        if not request.source_id:
            raise BadRequestError("Missing sourceId for delete action")
        await delete_handler.handle(
            DeleteSourceCommand(source_id=request.source_id, user_id=auth.user_id)
        )
        return SuccessResponse()

    raise BadRequestError("Invalid action")


@router.get(
    "/profile/subscriptions",
    response_model=list[SubscriptionItemResponse],
    status_code=status.HTTP_200_OK,
    summary="我的订阅",
)
async def list_my_subscriptions(
    auth: AuthContext = Depends(get_current_auth),
    query_service: SourceQueryService = Depends(get_source_query_service),
) -> list[SubscriptionItemResponse]:
    items = await query_service.list_active_subscriptions(auth.user_id)
    return [
        SubscriptionItemResponse(
            user_id=item.subscription.user_id,
            news_source_id=item.subscription.news_source_id,
            status=item.subscription.status,
            news_source=NewsSourceResponse.model_validate(item.news_source),
        )
        for item in items
    ]


@router.post(
    "/profile/subscriptions",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="切换/删除订阅",
)
async def manage_subscription(
    request: ManageSubscriptionRequest,
    auth: AuthContext = Depends(get_current_auth),
    toggle_handler: ToggleSubscriptionHandler = Depends(
        get_toggle_subscription_handler
    ),
    remove_handler: RemoveSubscriptionHandler = Depends(
        get_remove_subscription_handler
    ),
) -> ToggleSubscriptionResponse | SuccessResponse:
    if request.action == "toggle":
        new_status = await toggle_handler.handle(
            ToggleSubscriptionCommand(
                user_id=auth.user_id, news_source_id=request.news_source_id
            )
        )
        return ToggleSubscriptionResponse(success=True, new_status=new_status.value)

    if request.action == "remove":
        await remove_handler.handle(
            RemoveSubscriptionCommand(
                user_id=auth.user_id, news_source_id=request.news_source_id
            )
        )
        return SuccessResponse()

    raise BadRequestError("Invalid action")
