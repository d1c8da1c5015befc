"""Logging configuration.

两套日志并存：
1. loguru: 运维/调试日志（logger.info / logger.warning ...）
2. structlog: 商品目录业务事件（BusinessEvents），非 local 环境输出 JSON，便于检索
"""

import logging
import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings

_LOGURU_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str | None = None) -> None:
    """Configure loguru and structlog. Safe to call more than once."""
    level = (level or settings.LOG_LEVEL).upper()
    json_output = settings.ENVIRONMENT != "local"

    _configure_structlog(level, json_output)
    _configure_loguru(level, json_output)

    logger.info(f"Logging configured (level={level}, json={json_output})")


def _configure_structlog(level: str, json_output: bool) -> None:
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru(level: str, json_output: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOGURU_FORMAT, colorize=not json_output)

    if json_output:
        # 非本地环境额外落盘，按天切分
        logger.add(
            "logs/product_catalog_{time:YYYY-MM-DD}.log",
            level="INFO",
            rotation="00:00",
            retention="14 days",
            serialize=True,
            enqueue=True,
        )


def _level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level, logging.INFO)


# ============================================================================
# 业务事件日志
# ============================================================================


class BusinessEvents:
    """商品目录业务事件。

    每个事件对应一个固定的 event 名称与 event_type，字段保持稳定，方便日志平台按字段聚合。

    Usage:
        BusinessEvents.catalog_loaded(product_count=10, file_count=1)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def _emit(cls, level: str, event: str, event_type: str, **fields: Any) -> None:
        getattr(cls._log, level)(event, event_type=event_type, **fields)

    @classmethod
    def catalog_mode_resolved(
        cls, mode: str, requested_mode: str, reason: str | None = None, **extra: Any
    ) -> None:
        """启动时确定的数据源模式；发生回退时以 warning 级别记录。"""
        cls._emit(
            "info" if mode == requested_mode else "warning",
            "catalog_mode_resolved",
            "startup",
            mode=mode,
            requested_mode=requested_mode,
            reason=reason,
            **extra,
        )

    @classmethod
    def catalog_loaded(cls, product_count: int, file_count: int, **extra: Any) -> None:
        cls._emit(
            "info",
            "catalog_loaded",
            "catalog",
            product_count=product_count,
            file_count=file_count,
            **extra,
        )

    @classmethod
    def catalog_reload_failed(
        cls, error: str, consecutive_failures: int, **extra: Any
    ) -> None:
        """定时刷新失败，继续使用旧快照。"""
        cls._emit(
            "warning",
            "catalog_reload_failed",
            "catalog_error",
            error=error,
            consecutive_failures=consecutive_failures,
            **extra,
        )

    @classmethod
    def catalog_degraded_start(cls, error: str, **extra: Any) -> None:
        """首次加载失败，以空目录启动。"""
        cls._emit("warning", "catalog_degraded_start", "degradation", error=error, **extra)

    @classmethod
    def product_found(
        cls, product_id: str, product_name: str, source: str, **extra: Any
    ) -> None:
        cls._emit(
            "info",
            "product_found",
            "query",
            product_id=product_id,
            product_name=product_name,
            source=source,
            **extra,
        )

    @classmethod
    def product_failure_injected(cls, product_id: str, flag_key: str, **extra: Any) -> None:
        cls._emit(
            "warning",
            "product_failure_injected",
            "fault_injection",
            product_id=product_id,
            flag_key=flag_key,
            **extra,
        )

    @classmethod
    def feature_flag_evaluation_failed(
        cls, flag_key: str, error: str, default: bool, **extra: Any
    ) -> None:
        cls._emit(
            "warning",
            "feature_flag_evaluation_failed",
            "feature_flag",
            flag_key=flag_key,
            error=error,
            default=default,
            **extra,
        )
