"""统一的健康检查类型定义。"""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """健康检查状态枚举。"""

    OK = "ok"
    ERROR = "error"
    SKIPPED = "skipped"
    DEGRADED = "degraded"


class DataServiceHealthResult(BaseModel):
    """数据服务健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    reachable: bool = Field(..., description="是否可达")
    status_code: int | None = Field(None, description="上游 HTTP 状态码")
    error: str | None = Field(None, description="错误信息")

    def to_dict(self) -> dict[str, str | bool | int | None]:
        """转换为字典（用于 API 响应）。"""
        return self.model_dump(mode="json", exclude_none=False)
