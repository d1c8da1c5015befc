"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务）
- integration/: 集成测试（需要 PostgreSQL / Redis）

使用方法：
    # 运行所有测试
    uv run pytest

    # 只运行单元测试
    uv run pytest tests/unit/

    # 只运行集成测试（需要 Docker）
    uv run pytest tests/integration/ -m integration
"""

import json
from collections.abc import AsyncGenerator, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.core.infrastructure.adapters.feature_flag_adapter import (
    StaticFeatureFlagClient,
)
from src.modules.catalog.application.services import ProductCatalogService
from src.modules.catalog.infrastructure.catalog_store import CatalogStore
from src.modules.catalog.infrastructure.repositories import FileProductCatalogSource
from src.modules.catalog.infrastructure.runtime_factory import (
    CatalogRuntimeComponents,
)

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def products_dir(tmp_path: Path) -> Path:
    path = tmp_path / "products"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(products_dir: Path) -> Settings:
    """测试环境配置。"""
    return Settings(
        _env_file=None,
        ENVIRONMENT="local",
        PRODUCTS_DIR=str(products_dir),
        USE_DATABASE=False,
        FEATURE_FLAG_BACKEND="static",
        FEATURE_FLAGS={},
        REDIS_URL="redis://localhost:6379/1",  # 使用 DB 1 隔离测试
    )


# ============================================
# 商品数据 Fixtures
# ============================================


def _make_product_data(product_id: str, name: str, **overrides: Any) -> dict[str, Any]:
    """构造一条 lowerCamelCase 商品记录。"""
    data: dict[str, Any] = {
        "id": product_id,
        "name": name,
        "description": f"{name} description",
        "picture": f"{product_id}.jpg",
        "priceUsd": {"currencyCode": "USD", "units": 10, "nanos": 500000000},
        "categories": ["accessories"],
    }
    data.update(overrides)
    return data


def _write_products(
    directory: Path, filename: str, products: Sequence[dict[str, Any]]
) -> Path:
    path = directory / filename
    path.write_text(json.dumps({"products": list(products)}), encoding="utf-8")
    return path


@pytest.fixture
def product_factory():
    return _make_product_data


@pytest.fixture
def write_products():
    return _write_products


@pytest.fixture
def sample_products() -> list[dict[str, Any]]:
    """示例商品数据。"""
    return [
        _make_product_data(
            "OLJCESPC7Z",
            "National Park Foundation Explorascope",
            description="A manual alt-azimuth, refractor telescope.",
            categories=["telescopes"],
        ),
        _make_product_data(
            "66VCHSJNUP",
            "Starsense Explorer Refractor Telescope",
            description="Uses your smartphone to analyze the night sky.",
            categories=["telescopes"],
        ),
        _make_product_data(
            "L9ECAV7KIM",
            "Lens Cleaning Kit",
            description="Wipe away dust and fingerprints.",
            categories=["accessories"],
        ),
    ]


@pytest.fixture
def populated_products_dir(
    products_dir: Path, sample_products: list[dict[str, Any]]
) -> Path:
    _write_products(products_dir, "products.json", sample_products)
    return products_dir


# ============================================
# Mock 服务 Fixtures
# ============================================


@pytest.fixture
def mock_redis_client() -> MagicMock:
    """Mock Redis 客户端。"""
    from src.core.infrastructure.redis.client import RedisClient

    client = MagicMock(spec=RedisClient)
    client.ping = AsyncMock(return_value=True)
    client.get_config = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
async def catalog_runtime(
    populated_products_dir: Path,
) -> AsyncGenerator[CatalogRuntimeComponents, None]:
    """基于临时目录的文件模式运行时。"""
    store = CatalogStore(populated_products_dir, reload_interval=3600)
    await store.start()
    source = FileProductCatalogSource(store)
    feature_flags = StaticFeatureFlagClient()
    runtime = CatalogRuntimeComponents(
        service=ProductCatalogService(source, feature_flags),
        source=source,
        feature_flags=feature_flags,
        store=store,
    )

    yield runtime

    await runtime.aclose()


@pytest.fixture
async def async_client(
    catalog_runtime: CatalogRuntimeComponents,
) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。"""
    from main import app

    app.state.catalog_runtime = catalog_runtime

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.state.catalog_runtime = None
