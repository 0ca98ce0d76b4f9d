"""Logging configuration with structlog integration.

两套日志各司其职：
1. loguru: 运维日志（请求失败、降级、调试信息），本地输出到终端，部署环境另按天落盘
2. structlog: 业务事件（订阅变更、配额拒绝、计数漂移、会话刷新），部署环境输出 JSON 便于检索

所有业务事件都带有 service / environment 两个上下文字段。
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def setup_logging() -> None:
    """Configure loguru and structlog. Safe to call more than once."""
    level = _level_number(settings.LOG_LEVEL)
    _configure_structlog(level)
    _configure_loguru()

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=settings.PROJECT_NAME, environment=settings.ENVIRONMENT
    )
    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog(level: int) -> None:
    local = settings.ENVIRONMENT == "local"
    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True)
        if local
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=not local),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _configure_loguru() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL.upper(),
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    if settings.ENVIRONMENT == "local":
        return

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / f"{settings.PROJECT_NAME}_{{time:YYYY-MM-DD}}.log",
        rotation="00:00",
        retention=f"{settings.LOG_RETENTION_DAYS} days",
        level="INFO",
        format=FILE_FORMAT,
        enqueue=True,
    )


def _level_number(level: str) -> int:
    # 未知级别按 INFO 处理
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.subscription_changed(
            user_id="u1", source_id="s1", status="Subscribed", subscriber_count=3
        )
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def subscription_changed(
        cls,
        user_id: str,
        source_id: str,
        status: str,
        subscriber_count: int | None,
        **extra: Any,
    ) -> None:
        """记录订阅状态变更事件。"""
        cls._log.info(
            "subscription_changed",
            event_type="subscription",
            user_id=user_id,
            source_id=source_id,
            status=status,
            subscriber_count=subscriber_count,
            **extra,
        )

    @classmethod
    def subscription_quota_rejected(
        cls,
        user_id: str,
        plan: str,
        limit: int,
        current_count: int,
        **extra: Any,
    ) -> None:
        """记录订阅配额拒绝事件。"""
        cls._log.warning(
            "subscription_quota_rejected",
            event_type="quota",
            user_id=user_id,
            plan=plan,
            limit=limit,
            current_count=current_count,
            **extra,
        )

    @classmethod
    def secondary_write_failed(
        cls,
        operation: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录次要写入失败事件（主操作已成功，数据可能漂移）。"""
        cls._log.warning(
            "secondary_write_failed",
            event_type="drift",
            operation=operation,
            error=error,
            **extra,
        )

    @classmethod
    def source_created(
        cls,
        source_id: str,
        owner_id: str,
        auto_subscribed: bool,
        **extra: Any,
    ) -> None:
        """记录新闻源创建事件。"""
        cls._log.info(
            "source_created",
            event_type="source",
            source_id=source_id,
            owner_id=owner_id,
            auto_subscribed=auto_subscribed,
            **extra,
        )

    @classmethod
    def profile_created(cls, user_id: str, plan: str, **extra: Any) -> None:
        """记录用户档案创建事件。"""
        cls._log.info(
            "profile_created",
            event_type="profile",
            user_id=user_id,
            plan=plan,
            **extra,
        )

    @classmethod
    def profile_updated(
        cls,
        user_id: str,
        updated_fields: list[str],
        **extra: Any,
    ) -> None:
        """记录用户档案更新事件。"""
        cls._log.info(
            "profile_updated",
            event_type="profile",
            user_id=user_id,
            updated_fields=updated_fields,
            **extra,
        )

    @classmethod
    def demo_brief_served(
        cls,
        user_id: str,
        official_user_id: str,
        **extra: Any,
    ) -> None:
        """记录演示简报回退事件。"""
        cls._log.info(
            "demo_brief_served",
            event_type="brief",
            user_id=user_id,
            official_user_id=official_user_id,
            **extra,
        )

    @classmethod
    def session_fetch_failed(
        cls,
        reason: str,
        fallback_used: bool,
        **extra: Any,
    ) -> None:
        """记录会话获取失败事件。"""
        cls._log.warning(
            "session_fetch_failed",
            event_type="session",
            reason=reason,
            fallback_used=fallback_used,
            **extra,
        )

    @classmethod
    def session_bootstrap_failed(
        cls,
        attempts: int,
        error: str,
        **extra: Any,
    ) -> None:
        """记录会话初始化失败事件（视为未登录）。"""
        cls._log.warning(
            "session_bootstrap_failed",
            event_type="session",
            attempts=attempts,
            error=error,
            **extra,
        )

    @classmethod
    def session_refreshed(cls, user_id: str, **extra: Any) -> None:
        """记录会话刷新事件。"""
        cls._log.info(
            "session_refreshed",
            event_type="session",
            user_id=user_id,
            **extra,
        )
