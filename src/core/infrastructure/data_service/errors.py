"""Data service error types."""

from src.core.domain.exceptions import UpstreamFailureError


class DataServiceError(UpstreamFailureError):
    """数据服务请求失败（网络错误或非 2xx 响应）。

    对外仍然表现为通用的 500，具体原因保存在 detail 中用于日志。
    """

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        upstream_code: str | None = None,
    ):
        self.detail = detail
        self.status_code = status_code
        self.upstream_code = upstream_code
        super().__init__()

    def __str__(self) -> str:
        if self.status_code is None:
            return f"data service unavailable: {self.detail}"
        return f"data service returned {self.status_code}: {self.detail}"
