"""User profile command handlers."""

from loguru import logger
from pydantic import ValidationError

from src.core.domain.exceptions import BadRequestError, NoValidFieldsError
from src.core.infrastructure.logging import BusinessEvents
from src.modules.users.application.commands import (
    EnsureProfileCommand,
    UpdateProfileCommand,
)
from src.modules.users.domain.entities import (
    UPDATABLE_PROFILE_FIELDS,
    ProfileChanges,
    UserProfile,
)
from src.modules.users.domain.exceptions import ProfileNotFoundError
from src.modules.users.domain.repository import UserProfileRepository


class EnsureProfileHandler:
    """Return the caller's profile, creating a default one if missing."""

    def __init__(self, profile_repository: UserProfileRepository):
        self.profile_repository = profile_repository

    async def handle(self, command: EnsureProfileCommand) -> UserProfile:
        profile = await self.profile_repository.get_by_user_id(command.user_id)
        if profile is not None:
            return profile

        created = await self.profile_repository.create(
            UserProfile.create_default(command.user_id, command.email)
        )
        logger.info(f"Created default profile for user {command.user_id}")
        BusinessEvents.profile_created(
            user_id=command.user_id, plan=created.pricing_plan
        )
        return created


class UpdateProfileHandler:
    """Handle profile update."""

    def __init__(self, profile_repository: UserProfileRepository):
        self.profile_repository = profile_repository

    async def handle(self, command: UpdateProfileCommand) -> UserProfile:
        allowed = {
            key: value
            for key, value in command.updates.items()
            if key in UPDATABLE_PROFILE_FIELDS
        }
        if not allowed:
            raise NoValidFieldsError()

        try:
            changes = ProfileChanges.model_validate(allowed)
        except ValidationError as exc:
            message = exc.errors()[0]["msg"]
            raise BadRequestError(f"Invalid profile fields: {message}") from exc
        values = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            raise NoValidFieldsError()

        profile = await self.profile_repository.update_fields(command.user_id, values)
        if profile is None:
            raise ProfileNotFoundError(command.user_id)

        BusinessEvents.profile_updated(
            user_id=command.user_id, updated_fields=sorted(values)
        )
        return profile
