"""Feature flag adapter implementations.

- StaticFeatureFlagClient: 从配置（FEATURE_FLAGS）读取固定开关值
- RedisFeatureFlagClient: 从 Redis 动态配置读取，可在运行时切换
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from loguru import logger

from src.core.domain.ports.feature_flags import FeatureFlagClient
from src.core.infrastructure.health import RedisHealthResult
from src.core.infrastructure.logging import BusinessEvents
from src.core.infrastructure.redis.client import RedisClient
from src.core.infrastructure.redis.keys import RedisKeys


class StaticFeatureFlagClient(FeatureFlagClient):
    """Feature flags backed by an in-process mapping."""

    def __init__(self, flags: Mapping[str, bool] | None = None) -> None:
        self._flags = dict(flags or {})

    async def get_boolean_value(
        self,
        flag_key: str,
        default: bool,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        return self._flags.get(flag_key, default)


class RedisFeatureFlagClient(FeatureFlagClient):
    """Feature flags stored as JSON booleans under ``config:feature_flag:<key>``."""

    def __init__(self, redis_client: RedisClient, *, timeout: float = 1.0) -> None:
        self._redis = redis_client
        self._timeout = timeout

    async def get_boolean_value(
        self,
        flag_key: str,
        default: bool,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        try:
            value = await asyncio.wait_for(
                self._redis.get_config(RedisKeys.feature_flag(flag_key)),
                timeout=self._timeout,
            )
        except Exception as e:
            logger.warning(f"Feature flag '{flag_key}' evaluation failed: {e!r}")
            BusinessEvents.feature_flag_evaluation_failed(
                flag_key=flag_key, error=repr(e), default=default
            )
            return default

        if value is None:
            return default
        if not isinstance(value, bool):
            BusinessEvents.feature_flag_evaluation_failed(
                flag_key=flag_key,
                error=f"non-boolean value {value!r}",
                default=default,
            )
            return default
        return value

    async def health_check(self) -> RedisHealthResult:
        return await self._redis.health_check()

    async def aclose(self) -> None:
        await self._redis.close()
