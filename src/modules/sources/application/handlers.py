"""Source and subscription command handlers."""

from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import ValidationError

from src.core.application.best_effort import run_best_effort
from src.core.domain.exceptions import BadRequestError, NoValidFieldsError
from src.core.infrastructure.logging import BusinessEvents
from src.modules.sources.application.commands import (
    ChangeSubscriptionCommand,
    CreateSourceCommand,
    DeleteSourceCommand,
    RemoveSubscriptionCommand,
    SubscribeAction,
    ToggleSubscriptionCommand,
    UpdateSourceCommand,
)
from src.modules.sources.application.services import SubscriptionStatusService
from src.modules.sources.domain.entities import (
    UPDATABLE_SOURCE_FIELDS,
    NewsSource,
    NewsSourceDraft,
    SourceChanges,
    SubscriptionStatus,
)
from src.modules.sources.domain.exceptions import SourceNotFoundError
from src.modules.sources.domain.repository import (
    NewsSourceRepository,
    SubscriptionRepository,
)
from src.modules.sources.domain.site_info import extract_site_info, looks_like_feed


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


class CreateSourceHandler:
    """Handle source creation.

    创建者自动订阅：新闻源写入成功后再写订阅行，订阅行写入失败不影响创建结果。
    """

    def __init__(
        self,
        source_repository: NewsSourceRepository,
        subscription_repository: SubscriptionRepository,
    ):
        self.source_repository = source_repository
        self.subscription_repository = subscription_repository

    async def handle(self, command: CreateSourceCommand) -> NewsSource:
        draft = self._build_draft(command.data)
        source = await self.source_repository.create(command.user_id, draft)
        logger.info(f"Created source: {source.title} ({source.id})")

        subscribed = await run_best_effort(
            "auto_subscribe_creator",
            lambda: self.subscription_repository.save_status(
                command.user_id,
                source.id,
                SubscriptionStatus.SUBSCRIBED,
                exists=False,
            ),
            source_id=source.id,
            user_id=command.user_id,
        )
        BusinessEvents.source_created(
            source_id=source.id,
            owner_id=command.user_id,
            auto_subscribed=subscribed,
        )
        return source

    @staticmethod
    def _build_draft(data: dict[str, Any]) -> NewsSourceDraft:
        values = dict(data)
        link = values.get("link")
        if isinstance(link, str) and link:
            if not values.get("title"):
                info = extract_site_info(link)
                values["title"] = info.title
                if not values.get("description"):
                    values["description"] = info.description
                if not values.get("category"):
                    values["category"] = info.category
            if not values.get("rss") and looks_like_feed(link):
                values["rss"] = link
        try:
            return NewsSourceDraft.model_validate(values)
        except ValidationError as exc:
            raise BadRequestError(
                f"Invalid newsSourceData: {_first_error(exc)}"
            ) from exc


class UpdateSourceHandler:
    """Handle source update. Only the owner's row can match."""

    def __init__(self, source_repository: NewsSourceRepository):
        self.source_repository = source_repository

    async def handle(self, command: UpdateSourceCommand) -> None:
        allowed = {
            key: value
            for key, value in command.updates.items()
            if key in UPDATABLE_SOURCE_FIELDS
        }
        if not allowed:
            raise NoValidFieldsError()
        try:
            values = SourceChanges.model_validate(allowed).to_values()
        except ValidationError as exc:
            raise BadRequestError(f"Invalid updates: {_first_error(exc)}") from exc
        if not values:
            raise NoValidFieldsError()

        updated = await self.source_repository.update_owned(
            command.source_id, command.user_id, values
        )
        if not updated:
            raise SourceNotFoundError(command.source_id)
        logger.info(f"Updated source {command.source_id}: {sorted(values)}")


class DeleteSourceHandler:
    """Handle source deletion. Only the owner's row can match."""

    def __init__(self, source_repository: NewsSourceRepository):
        self.source_repository = source_repository

    async def handle(self, command: DeleteSourceCommand) -> None:
        deleted = await self.source_repository.delete_owned(
            command.source_id, command.user_id
        )
        if not deleted:
            raise SourceNotFoundError(command.source_id)
        logger.info(f"Deleted source {command.source_id}")


@dataclass(frozen=True)
class SubscriptionChangeResult:
    is_subscribed: bool
    new_subscriber_count: int


class ChangeSubscriptionHandler:
    """Handle subscribe/unsubscribe from the community page.

    已经处于目标状态时不做任何写入，也不检查配额。
    """

    def __init__(
        self,
        source_repository: NewsSourceRepository,
        subscription_repository: SubscriptionRepository,
        status_service: SubscriptionStatusService,
    ):
        self.source_repository = source_repository
        self.subscription_repository = subscription_repository
        self.status_service = status_service

    async def handle(
        self, command: ChangeSubscriptionCommand
    ) -> SubscriptionChangeResult:
        source = await self.source_repository.get_by_id(command.source_id)
        if source is None:
            raise SourceNotFoundError(command.source_id)

        subscribe = command.action == SubscribeAction.SUBSCRIBE
        existing = await self.subscription_repository.get(
            command.user_id, command.source_id
        )
        currently_active = existing is not None and existing.is_active
        if currently_active == subscribe:
            return SubscriptionChangeResult(
                is_subscribed=subscribe,
                new_subscriber_count=source.subscribers_num,
            )

        new_count = await self.status_service.change_status(
            command.user_id, command.source_id, subscribe, existing, source
        )
        return SubscriptionChangeResult(
            is_subscribed=subscribe,
            new_subscriber_count=(
                new_count if new_count is not None else source.subscribers_num
            ),
        )


class ToggleSubscriptionHandler:
    """Handle toggle from the profile page. A missing row counts as Unsubscribed."""

    def __init__(
        self,
        source_repository: NewsSourceRepository,
        subscription_repository: SubscriptionRepository,
        status_service: SubscriptionStatusService,
    ):
        self.source_repository = source_repository
        self.subscription_repository = subscription_repository
        self.status_service = status_service

    async def handle(self, command: ToggleSubscriptionCommand) -> SubscriptionStatus:
        existing = await self.subscription_repository.get(
            command.user_id, command.news_source_id
        )
        subscribe = existing is None or not existing.is_active

        source = await self.source_repository.get_by_id(command.news_source_id)
        if source is None and subscribe:
            raise SourceNotFoundError(command.news_source_id)

        await self.status_service.change_status(
            command.user_id, command.news_source_id, subscribe, existing, source
        )
        if subscribe:
            return SubscriptionStatus.SUBSCRIBED
        return SubscriptionStatus.UNSUBSCRIBED


class RemoveSubscriptionHandler:
    """Handle subscription removal. A missing row is a no-op."""

    def __init__(
        self,
        source_repository: NewsSourceRepository,
        subscription_repository: SubscriptionRepository,
        status_service: SubscriptionStatusService,
    ):
        self.source_repository = source_repository
        self.subscription_repository = subscription_repository
        self.status_service = status_service

    async def handle(self, command: RemoveSubscriptionCommand) -> None:
        removed = await self.subscription_repository.delete(
            command.user_id, command.news_source_id
        )
        if removed is None or not removed.is_active:
            return

        source = await self.source_repository.get_by_id(command.news_source_id)
        if source is not None:
            await self.status_service.adjust_counter(source, -1)
