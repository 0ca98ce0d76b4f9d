"""Tests for owned sources and the community listing."""

import pytest

from src.core.config import settings
from src.core.domain.exceptions import BadRequestError, NoValidFieldsError
from src.modules.sources.application.commands import (
    CreateSourceCommand,
    DeleteSourceCommand,
    UpdateSourceCommand,
)
from src.modules.sources.application.handlers import (
    CreateSourceHandler,
    DeleteSourceHandler,
    UpdateSourceHandler,
)
from src.modules.sources.application.query_service import SourceQueryService
from src.modules.sources.domain.entities import NewsSource, SubscriptionStatus
from src.modules.sources.domain.exceptions import SourceNotFoundError
from src.modules.sources.domain.site_info import extract_site_info, looks_like_feed

pytestmark = pytest.mark.anyio

OWNER = "owner-1"
OFFICIAL = "official-account"


@pytest.fixture
def create_handler(source_repository, subscription_repository):
    return CreateSourceHandler(source_repository, subscription_repository)


@pytest.fixture
def query_service(source_repository, subscription_repository):
    return SourceQueryService(source_repository, subscription_repository)


# ============================================
# Site info
# ============================================


class TestSiteInfo:
    def test_title_from_first_host_label(self) -> None:
        info = extract_site_info("https://www.tech-crunch.com/feed")
        assert info.title == "Tech Crunch"
        assert info.description == "News from tech-crunch.com"
        assert info.category == "General"

    def test_subdomain_is_kept_in_description(self) -> None:
        info = extract_site_info("https://blog.example.org/posts")
        assert info.title == "Blog"
        assert info.description == "News from blog.example.org"

    def test_unparsable_link(self) -> None:
        info = extract_site_info("not a url")
        assert info.title == ""
        assert info.description == ""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://example.com/rss", True),
            ("https://example.com/feed/atom", True),
            ("https://example.com/index.xml", True),
            ("https://example.com/news", False),
        ],
    )
    def test_looks_like_feed(self, url: str, expected: bool) -> None:
        assert looks_like_feed(url) is expected


class TestNewsSourceEntity:
    def test_coerces_row_values(self) -> None:
        source = NewsSource.model_validate(
            {"id": 42, "title": "T", "subscribers_num": None, "is_public": None}
        )
        assert source.id == "42"
        assert source.subscribers_num == 0
        assert source.is_public is False

    def test_adjusted_count_is_clamped(self) -> None:
        source = NewsSource(id="1", title="T", subscribers_num=0)
        assert source.adjusted_subscriber_count(-1) == 0
        assert source.adjusted_subscriber_count(1) == 1


# ============================================
# Create / update / delete
# ============================================


class TestCreateSource:
    async def test_create_subscribes_owner(
        self, create_handler, subscription_repository
    ) -> None:
        source = await create_handler.handle(
            CreateSourceCommand(
                user_id=OWNER,
                data={"title": "Daily Tech", "link": "https://tech.example.com"},
            )
        )

        assert source.user_id == OWNER
        assert source.subscribers_num == 1
        assert source.status == "Activated"
        assert subscription_repository.status_of(OWNER, source.id) == "Subscribed"

    async def test_create_derives_metadata_from_feed_link(
        self, create_handler
    ) -> None:
        source = await create_handler.handle(
            CreateSourceCommand(
                user_id=OWNER, data={"link": "https://www.tech-crunch.com/feed"}
            )
        )

        assert source.title == "Tech Crunch"
        assert source.description == "News from tech-crunch.com"
        assert source.category == "General"
        assert source.rss == "https://www.tech-crunch.com/feed"

    async def test_create_keeps_explicit_fields(self, create_handler) -> None:
        source = await create_handler.handle(
            CreateSourceCommand(
                user_id=OWNER,
                data={
                    "title": "Mine",
                    "link": "https://example.com/news",
                    "category": "Science",
                },
            )
        )

        assert source.title == "Mine"
        assert source.category == "Science"
        assert source.rss is None

    async def test_create_ignores_server_managed_fields(self, create_handler) -> None:
        source = await create_handler.handle(
            CreateSourceCommand(
                user_id=OWNER,
                data={"title": "Mine", "subscribers_num": 999, "user_id": "other"},
            )
        )

        assert source.subscribers_num == 1
        assert source.user_id == OWNER

    async def test_create_without_title_or_link_is_rejected(
        self, create_handler
    ) -> None:
        with pytest.raises(BadRequestError):
            await create_handler.handle(
                CreateSourceCommand(user_id=OWNER, data={"description": "no title"})
            )

    async def test_auto_subscribe_failure_keeps_created_source(
        self, create_handler, source_repository, subscription_repository
    ) -> None:
        subscription_repository.fail_writes = True

        source = await create_handler.handle(
            CreateSourceCommand(user_id=OWNER, data={"title": "Still created"})
        )

        assert source.id in source_repository.sources
        assert subscription_repository.status_of(OWNER, source.id) is None


class TestUpdateSource:
    async def test_update_applies_allowed_fields(self, source_repository) -> None:
        source_repository.add("src-1", user_id=OWNER, subscribers_num=3)
        handler = UpdateSourceHandler(source_repository)

        await handler.handle(
            UpdateSourceCommand(
                source_id="src-1",
                user_id=OWNER,
                updates={"title": "Renamed", "subscribers_num": 100},
            )
        )

        updated = source_repository.sources["src-1"]
        assert updated.title == "Renamed"
        assert updated.subscribers_num == 3

    async def test_update_without_allowed_fields_is_rejected(
        self, source_repository
    ) -> None:
        source_repository.add("src-1", user_id=OWNER)
        handler = UpdateSourceHandler(source_repository)

        with pytest.raises(NoValidFieldsError):
            await handler.handle(
                UpdateSourceCommand(
                    source_id="src-1", user_id=OWNER, updates={"status": "Hidden"}
                )
            )

    async def test_update_of_foreign_source_is_not_found(
        self, source_repository
    ) -> None:
        source_repository.add("src-1", user_id="someone-else")
        handler = UpdateSourceHandler(source_repository)

        with pytest.raises(SourceNotFoundError):
            await handler.handle(
                UpdateSourceCommand(
                    source_id="src-1", user_id=OWNER, updates={"title": "Mine now"}
                )
            )


class TestDeleteSource:
    async def test_delete_owned_source(self, source_repository) -> None:
        source_repository.add("src-1", user_id=OWNER)

        await DeleteSourceHandler(source_repository).handle(
            DeleteSourceCommand(source_id="src-1", user_id=OWNER)
        )

        assert "src-1" not in source_repository.sources

    async def test_delete_foreign_source_is_not_found(
        self, source_repository
    ) -> None:
        source_repository.add("src-1", user_id="someone-else")

        with pytest.raises(SourceNotFoundError):
            await DeleteSourceHandler(source_repository).handle(
                DeleteSourceCommand(source_id="src-1", user_id=OWNER)
            )
        assert "src-1" in source_repository.sources


# ============================================
# Listings
# ============================================


class TestCommunityListing:
    @pytest.fixture(autouse=True)
    def official_account(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "OFFICIAL_USER_ID", OFFICIAL)

    async def test_split_and_flags(
        self, query_service, source_repository, subscription_repository
    ) -> None:
        source_repository.add("off-1", user_id=OFFICIAL, subscribers_num=50)
        source_repository.add("com-1", user_id="alice", subscribers_num=3)
        source_repository.add("com-2", user_id="bob", subscribers_num=9)
        source_repository.add("private", user_id="bob", is_public=False)
        source_repository.add("draft", user_id="bob", status="Pending")
        subscription_repository.add("reader", "com-1", SubscriptionStatus.SUBSCRIBED)
        subscription_repository.add(
            "reader", "off-1", SubscriptionStatus.UNSUBSCRIBED
        )

        listing = await query_service.list_community("reader")

        assert [item.source.id for item in listing.official] == ["off-1"]
        assert [item.source.id for item in listing.community] == ["com-2", "com-1"]
        assert [item.source.id for item in listing.newly] == [
            "com-2",
            "com-1",
            "off-1",
        ]
        flags = {item.source.id: item.is_subscribed for item in listing.community}
        assert flags == {"com-2": False, "com-1": True}
        assert listing.official[0].is_subscribed is False

    async def test_newly_is_limited(self, query_service, source_repository) -> None:
        for index in range(12):
            source_repository.add(f"s-{index}", user_id="alice")

        listing = await query_service.list_community(None)

        assert len(listing.newly) == settings.NEWLY_SOURCES_LIMIT
        assert listing.newly[0].source.id == "s-11"

    async def test_anonymous_listing_has_no_flags(
        self, query_service, source_repository
    ) -> None:
        source_repository.add("com-1", user_id="alice")

        listing = await query_service.list_community(None)

        assert all(not item.is_subscribed for item in listing.community)

    async def test_unowned_sources_are_listed_as_official(
        self, query_service, source_repository
    ) -> None:
        source_repository.add("platform", user_id=None, subscribers_num=2)
        source_repository.add("off-1", user_id=OFFICIAL, subscribers_num=5)
        source_repository.add("com-1", user_id="alice")

        listing = await query_service.list_community(None)

        assert [item.source.id for item in listing.official] == ["off-1", "platform"]
        assert [item.source.id for item in listing.community] == ["com-1"]

    async def test_without_official_account_user_sources_are_community(
        self, query_service, source_repository, monkeypatch
    ) -> None:
        monkeypatch.setattr(settings, "OFFICIAL_USER_ID", None)
        source_repository.add("platform", user_id=None)
        source_repository.add("off-1", user_id=OFFICIAL)
        source_repository.add("com-1", user_id="alice")

        listing = await query_service.list_community(None)

        assert [item.source.id for item in listing.official] == ["platform"]
        assert {item.source.id for item in listing.community} == {"off-1", "com-1"}


class TestSubscriptionListing:
    async def test_active_subscriptions_skip_deleted_sources(
        self, query_service, source_repository, subscription_repository
    ) -> None:
        source_repository.add("src-1")
        subscription_repository.add("reader", "src-1", SubscriptionStatus.SUBSCRIBED)
        subscription_repository.add("reader", "gone", SubscriptionStatus.SUBSCRIBED)
        subscription_repository.add(
            "reader", "src-2", SubscriptionStatus.UNSUBSCRIBED
        )

        items = await query_service.list_active_subscriptions("reader")

        assert [item.news_source.id for item in items] == ["src-1"]
        assert items[0].subscription.status == "Subscribed"

    async def test_owned_sources_newest_first(
        self, query_service, source_repository
    ) -> None:
        source_repository.add("old", user_id=OWNER)
        source_repository.add("new", user_id=OWNER)
        source_repository.add("foreign", user_id="alice")

        sources = await query_service.list_owned(OWNER)

        assert [source.id for source in sources] == ["new", "old"]
