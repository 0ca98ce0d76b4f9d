"""Brief API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class BriefResponse(BaseModel):
    """Brief item as rendered by the briefs page."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="简报ID（user_id-brief_date）")
    date: str = Field(..., description="简报日期")
    audio: str = Field("", description="音频地址")
    audio_script: str = Field("", alias="audioScript", description="音频脚本")
    text_content: str = Field("", alias="textContent", description="正文")
    sources: int = Field(0, description="引用的新闻源数量")
    is_demo: bool = Field(False, alias="isDemo", description="是否为官方演示简报")
