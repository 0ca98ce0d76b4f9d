"""User profile application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.modules.users.application.handlers import (
    EnsureProfileHandler,
    UpdateProfileHandler,
)
from src.modules.users.domain.repository import UserProfileRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_user_profile_repository() -> UserProfileRepository:
    _missing_dependency("UserProfileRepository")


async def get_ensure_profile_handler(
    profile_repository: UserProfileRepository = Depends(get_user_profile_repository),
) -> EnsureProfileHandler:
    return EnsureProfileHandler(profile_repository)


async def get_update_profile_handler(
    profile_repository: UserProfileRepository = Depends(get_user_profile_repository),
) -> UpdateProfileHandler:
    return UpdateProfileHandler(profile_repository)
