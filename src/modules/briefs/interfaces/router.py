"""Brief API routes."""

from fastapi import APIRouter, Depends, status

from src.core.application.security import AuthContext, get_current_auth
from src.modules.briefs.application.dependencies import get_brief_query_service
from src.modules.briefs.application.query_service import BriefQueryService, BriefView
from src.modules.briefs.interfaces.schemas import BriefResponse

router = APIRouter(prefix="/briefs", tags=["briefs"])


def _to_response(view: BriefView) -> BriefResponse:
    brief = view.brief
    return BriefResponse(
        id=brief.brief_id,
        date=brief.brief_date,
        audio=brief.brief_audio_url or "",
        audio_script=brief.brief_audio_script or "",
        text_content=brief.text_content(),
        sources=brief.sources_count(),
        is_demo=view.is_demo,
    )


@router.get(
    "",
    response_model=list[BriefResponse],
    status_code=status.HTTP_200_OK,
    summary="我的简报",
    description="最近的简报（新的在前）；没有简报时返回一份官方演示简报",
)
async def list_briefs(
    auth: AuthContext = Depends(get_current_auth),
    query_service: BriefQueryService = Depends(get_brief_query_service),
) -> list[BriefResponse]:
    views = await query_service.list_for_user(auth.user_id)
    return [_to_response(view) for view in views]
