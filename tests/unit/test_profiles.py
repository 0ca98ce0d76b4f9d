"""Tests for user profile handlers."""

import pytest

from src.core.domain.exceptions import BadRequestError, NoValidFieldsError
from src.modules.users.application.commands import (
    EnsureProfileCommand,
    UpdateProfileCommand,
)
from src.modules.users.application.handlers import (
    EnsureProfileHandler,
    UpdateProfileHandler,
)
from src.modules.users.domain.exceptions import ProfileNotFoundError

pytestmark = pytest.mark.anyio

USER = "user-1"


class TestEnsureProfile:
    async def test_creates_default_profile(self, profile_repository) -> None:
        handler = EnsureProfileHandler(profile_repository)

        profile = await handler.handle(
            EnsureProfileCommand(user_id=USER, email="reader@example.com")
        )

        assert profile.pricing_plan == "Free"
        assert profile.brief_language == "English"
        assert profile.enable_email_delivery is False
        assert profile.join_date is not None
        assert profile.email == "reader@example.com"
        assert USER in profile_repository.profiles

    async def test_returns_existing_profile_unchanged(
        self, profile_repository
    ) -> None:
        profile_repository.add(USER, pricing_plan="Max", brief_language="Chinese")
        handler = EnsureProfileHandler(profile_repository)

        profile = await handler.handle(EnsureProfileCommand(user_id=USER))

        assert profile.pricing_plan == "Max"
        assert profile.brief_language == "Chinese"


class TestUpdateProfile:
    async def test_only_allowed_fields_are_applied(self, profile_repository) -> None:
        profile_repository.add(USER)
        handler = UpdateProfileHandler(profile_repository)

        profile = await handler.handle(
            UpdateProfileCommand(
                user_id=USER,
                updates={
                    "brief_language": "French",
                    "enable_email_delivery": True,
                    "pricing_plan": "Max",
                },
            )
        )

        assert profile.brief_language == "French"
        assert profile.enable_email_delivery is True
        assert profile.pricing_plan == "Free"

    async def test_no_allowed_fields_is_rejected(self, profile_repository) -> None:
        profile_repository.add(USER)
        handler = UpdateProfileHandler(profile_repository)

        with pytest.raises(NoValidFieldsError, match="No valid fields to update"):
            await handler.handle(
                UpdateProfileCommand(user_id=USER, updates={"pricing_plan": "Max"})
            )

    async def test_null_values_count_as_missing(self, profile_repository) -> None:
        profile_repository.add(USER)
        handler = UpdateProfileHandler(profile_repository)

        with pytest.raises(NoValidFieldsError):
            await handler.handle(
                UpdateProfileCommand(user_id=USER, updates={"brief_language": None})
            )

    async def test_wrong_type_is_rejected(self, profile_repository) -> None:
        profile_repository.add(USER)
        handler = UpdateProfileHandler(profile_repository)

        with pytest.raises(BadRequestError):
            await handler.handle(
                UpdateProfileCommand(
                    user_id=USER, updates={"enable_email_delivery": "yes"}
                )
            )

    async def test_missing_profile_is_not_found(self, profile_repository) -> None:
        handler = UpdateProfileHandler(profile_repository)

        with pytest.raises(ProfileNotFoundError):
            await handler.handle(
                UpdateProfileCommand(user_id=USER, updates={"brief_language": "German"})
            )
