"""User profile API routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from src.core.application.security import AuthContext, get_current_auth
from src.modules.users.application.commands import (
    EnsureProfileCommand,
    UpdateProfileCommand,
)
from src.modules.users.application.dependencies import (
    get_ensure_profile_handler,
    get_update_profile_handler,
)
from src.modules.users.application.handlers import (
    EnsureProfileHandler,
    UpdateProfileHandler,
)
from src.modules.users.interfaces.schemas import UserProfileResponse

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "/user",
    response_model=UserProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="获取用户档案",
    description="不存在时以默认值（Free / English / 关闭邮件推送）创建",
)
async def get_profile(
    auth: AuthContext = Depends(get_current_auth),
    handler: EnsureProfileHandler = Depends(get_ensure_profile_handler),
) -> UserProfileResponse:
    profile = await handler.handle(
        EnsureProfileCommand(user_id=auth.user_id, email=auth.email)
    )
    return UserProfileResponse.model_validate(profile)


@router.post(
    "/user",
    response_model=UserProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="更新用户档案",
    description="只接受 enable_email_delivery 和 brief_language，其他字段忽略",
)
async def update_profile(
    updates: dict[str, Any] = Body(...),
    auth: AuthContext = Depends(get_current_auth),
    handler: UpdateProfileHandler = Depends(get_update_profile_handler),
) -> UserProfileResponse:
    profile = await handler.handle(
        UpdateProfileCommand(user_id=auth.user_id, updates=updates)
    )
    return UserProfileResponse.model_validate(profile)
