"""Brief domain entities."""

import json
from datetime import date
from typing import Any

from pydantic import Field, field_validator

from src.core.domain.base_entity import BaseEntity


class UserBrief(BaseEntity):
    """Daily brief generated for a user.

    ``brief_content`` 可能是纯文本、JSON 字符串或 JSON 对象；
    ``news_source_ids`` 可能是列表、JSON 编码的列表或逗号分隔的字符串。
    """

    user_id: str = Field(..., description="用户ID")
    brief_date: str = Field(..., description="简报日期")
    brief_content: Any = Field(default=None, description="简报内容")
    news_source_ids: Any = Field(default=None, description="引用的新闻源")
    brief_audio_url: str | None = Field(default=None, description="音频地址")
    brief_audio_script: str | None = Field(default=None, description="音频脚本")

    @field_validator("brief_date", mode="before")
    @classmethod
    def _date_to_str(cls, value: Any) -> Any:
        return value.isoformat() if isinstance(value, date) else value

    @property
    def brief_id(self) -> str:
        return f"{self.user_id}-{self.brief_date}"

    def text_content(self) -> str:
        """Readable text of the brief.

        Structured content contributes its ``textContent``; anything else is
        returned as stored.
        """
        content = self.brief_content
        parsed = content
        if isinstance(content, str):
            try:
                parsed = json.loads(content)
            except ValueError:
                return content

        if isinstance(parsed, dict) and parsed.get("textContent"):
            return str(parsed["textContent"])
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        return json.dumps(content, ensure_ascii=False)

    def sources_count(self) -> int:
        ids = self.news_source_ids
        if not ids:
            return 0
        if isinstance(ids, list):
            return len(ids)
        if not isinstance(ids, str):
            return 0
        try:
            parsed = json.loads(ids)
        except ValueError:
            return len([part for part in ids.split(",") if part.strip()])
        return len(parsed) if isinstance(parsed, list) else 0
