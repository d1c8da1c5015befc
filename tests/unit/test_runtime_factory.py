"""Tests for catalog mode resolution and runtime wiring."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.core.infrastructure.adapters.feature_flag_adapter import (
    RedisFeatureFlagClient,
    StaticFeatureFlagClient,
)
from src.modules.catalog.domain.entities import CatalogMode
from src.modules.catalog.infrastructure.repositories import (
    FileProductCatalogSource,
    PostgreSQLProductCatalogSource,
)
from src.modules.catalog.infrastructure.runtime_factory import (
    build_catalog_runtime,
    build_feature_flag_client,
    resolve_catalog_engine,
)

pytestmark = pytest.mark.anyio

_FACTORY = "src.modules.catalog.infrastructure.runtime_factory"


def _mock_engine() -> MagicMock:
    engine = MagicMock()
    engine.dispose = AsyncMock()
    return engine


async def test_file_mode_by_default(test_settings, populated_products_dir) -> None:
    runtime = await build_catalog_runtime(test_settings)
    try:
        assert runtime.mode is CatalogMode.FILE
        assert isinstance(runtime.source, FileProductCatalogSource)
        assert runtime.store is not None
        assert runtime.store.running is True
        assert len(await runtime.service.list_products()) == 3
    finally:
        await runtime.aclose()

    assert runtime.store.running is False


async def test_database_requested_without_connection_string(test_settings) -> None:
    config = test_settings.model_copy(
        update={"USE_DATABASE": True, "DB_CONNECTION_STRING": None}
    )

    with patch(f"{_FACTORY}.create_catalog_engine") as create_engine:
        assert await resolve_catalog_engine(config) is None

    create_engine.assert_not_called()


async def test_database_unreachable_falls_back_to_file(
    test_settings, populated_products_dir
) -> None:
    config = test_settings.model_copy(
        update={
            "USE_DATABASE": True,
            "DB_CONNECTION_STRING": "postgres://u:p@localhost:1/catalog",
        }
    )
    engine = _mock_engine()

    with (
        patch(f"{_FACTORY}.create_catalog_engine", return_value=engine),
        patch(f"{_FACTORY}.init_db", AsyncMock(side_effect=TimeoutError())),
    ):
        runtime = await build_catalog_runtime(config)

    try:
        assert runtime.mode is CatalogMode.FILE
        assert runtime.engine is None
        engine.dispose.assert_awaited_once()
        assert len(await runtime.service.list_products()) == 3
    finally:
        await runtime.aclose()


async def test_database_mode_when_reachable(test_settings) -> None:
    config = test_settings.model_copy(
        update={
            "USE_DATABASE": True,
            "DB_CONNECTION_STRING": "postgres://u:p@db:5432/catalog",
            "DB_CONNECT_TIMEOUT_SEC": 1.5,
        }
    )
    engine = _mock_engine()
    init_db = AsyncMock()

    with (
        patch(f"{_FACTORY}.create_catalog_engine", return_value=engine) as create_engine,
        patch(f"{_FACTORY}.init_db", init_db),
    ):
        runtime = await build_catalog_runtime(config)

    assert runtime.mode is CatalogMode.DATABASE
    assert isinstance(runtime.source, PostgreSQLProductCatalogSource)
    assert runtime.store is None
    assert runtime.engine is engine
    create_engine.assert_called_once_with(
        "postgres://u:p@db:5432/catalog",
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_recycle=config.DB_POOL_RECYCLE_SEC,
    )
    init_db.assert_awaited_once_with(engine, timeout=1.5)

    await runtime.aclose()
    engine.dispose.assert_awaited_once()


def test_build_feature_flag_client(test_settings) -> None:
    static = build_feature_flag_client(
        test_settings.model_copy(update={"FEATURE_FLAGS": {"productCatalogFailure": True}})
    )
    assert isinstance(static, StaticFeatureFlagClient)

    redis_backed = build_feature_flag_client(
        test_settings.model_copy(update={"FEATURE_FLAG_BACKEND": "redis"})
    )
    assert isinstance(redis_backed, RedisFeatureFlagClient)
