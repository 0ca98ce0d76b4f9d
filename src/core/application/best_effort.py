"""Best-effort secondary writes.

多步写操作分两阶段：主写入失败直接向上抛出（500）；主写入成功后的次要写入
（订阅计数调整、创建后自动订阅）失败只记录 drift 事件，不影响响应。
"""

from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from src.core.domain.exceptions import UpstreamFailureError
from src.core.infrastructure.logging import BusinessEvents


async def run_best_effort(
    operation: str,
    action: Callable[[], Awaitable[Any]],
    **context: Any,
) -> bool:
    """Run a secondary write; return False (and log the drift) if it fails."""
    try:
        await action()
    except UpstreamFailureError as exc:
        logger.warning(f"Secondary write '{operation}' failed, data may drift: {exc}")
        BusinessEvents.secondary_write_failed(
            operation=operation, error=str(exc), **context
        )
        return False
    return True
