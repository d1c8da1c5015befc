"""Redis feature flag integration tests."""

import pytest

from src.core.infrastructure.adapters.feature_flag_adapter import (
    RedisFeatureFlagClient,
)
from src.core.infrastructure.redis.client import RedisClient
from src.core.infrastructure.redis.keys import RedisKeys

pytestmark = [pytest.mark.integration, pytest.mark.anyio]


@pytest.fixture
async def redis_client():
    """真实 Redis 客户端。"""
    client = RedisClient(url="redis://localhost:6379/1")
    if not await client.ping():
        await client.close()
        pytest.skip("Redis 不可用（localhost:6379）")

    await client.client.flushdb()
    yield client
    await client.client.flushdb()
    await client.close()


async def test_flag_toggled_at_runtime(redis_client) -> None:
    flags = RedisFeatureFlagClient(redis_client)
    flag_key = "productCatalogFailure"

    assert await flags.get_boolean_value(flag_key, False) is False

    await redis_client.set_config(RedisKeys.feature_flag(flag_key), True)
    assert await flags.get_boolean_value(flag_key, False) is True

    await redis_client.set_config(RedisKeys.feature_flag(flag_key), False)
    assert await flags.get_boolean_value(flag_key, True) is False
