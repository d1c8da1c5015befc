"""Redis 客户端封装。

本服务只把 Redis 当作动态配置存储（功能开关），值统一以 JSON 编码。
连接在第一次使用时建立，未启用 Redis 后端时不会产生任何连接。
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import redis.asyncio as aioredis
from loguru import logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

from src.core.config import settings
from src.core.infrastructure.health import HealthStatus, RedisHealthResult
from src.core.infrastructure.redis.keys import RedisKeys


class RedisClient:
    """Lazily connected async Redis client."""

    def __init__(self, url: str | None = None, *, socket_timeout: float = 2.0):
        self._url = url or settings.REDIS_URL
        self._socket_timeout = socket_timeout
        self._client: Redis | None = None

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = aioredis.from_url(
                self._url,
                decode_responses=True,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {e!r}")
            return False

    async def health_check(self) -> RedisHealthResult:
        if not await self.ping():
            return RedisHealthResult(
                status=HealthStatus.ERROR,
                connected=False,
                error="ping failed",
            )
        try:
            info = await self.client.info("server")
        except Exception as e:
            return RedisHealthResult(
                status=HealthStatus.ERROR, connected=True, error=str(e)
            )
        return RedisHealthResult(
            status=HealthStatus.OK,
            connected=True,
            version=info.get("redis_version", "unknown"),
        )

    # ============ 动态配置 ============

    async def get_config(self, key: str, default: Any = None) -> Any:
        """读取 ``config:<key>``，不存在时返回 default。"""
        raw = await self.client.get(RedisKeys.config(key))
        if raw is None:
            return default
        return json.loads(raw)

    async def set_config(self, key: str, value: Any) -> bool:
        return bool(await self.client.set(RedisKeys.config(key), json.dumps(value)))
