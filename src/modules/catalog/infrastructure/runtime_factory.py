"""Runtime factory wiring the catalog source, store and service.

启动时只确定一次数据源模式：
- USE_DATABASE 关闭 -> file
- USE_DATABASE 打开但未配置 DB_CONNECTION_STRING -> 告警并回退 file
- 数据库无法连接 -> 记录错误并回退 file
"""

from pathlib import Path

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine

from src.core.config import Settings, settings
from src.core.domain.ports.feature_flags import FeatureFlagClient
from src.core.infrastructure.adapters.feature_flag_adapter import (
    RedisFeatureFlagClient,
    StaticFeatureFlagClient,
)
from src.core.infrastructure.database.session import (
    create_catalog_engine,
    create_session_factory,
    init_db,
)
from src.core.infrastructure.logging import BusinessEvents
from src.core.infrastructure.redis.client import RedisClient
from src.modules.catalog.application.services import ProductCatalogService
from src.modules.catalog.domain.entities import CatalogMode
from src.modules.catalog.domain.repository import ProductCatalogSource
from src.modules.catalog.infrastructure.catalog_store import CatalogStore
from src.modules.catalog.infrastructure.mappers import ProductMapper
from src.modules.catalog.infrastructure.repositories import (
    FileProductCatalogSource,
    PostgreSQLProductCatalogSource,
)


class CatalogRuntimeComponents:
    """Bundle of objects needed to serve catalog queries."""

    def __init__(
        self,
        service: ProductCatalogService,
        source: ProductCatalogSource,
        feature_flags: FeatureFlagClient,
        store: CatalogStore | None = None,
        engine: AsyncEngine | None = None,
    ) -> None:
        self.service = service
        self.source = source
        self.feature_flags = feature_flags
        self.store = store
        self.engine = engine

    @property
    def mode(self) -> CatalogMode:
        return self.source.mode

    async def aclose(self) -> None:
        if self.store is not None:
            await self.store.stop()
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connection closed")
        await self.feature_flags.aclose()


def build_feature_flag_client(config: Settings) -> FeatureFlagClient:
    if config.FEATURE_FLAG_BACKEND == "redis":
        return RedisFeatureFlagClient(RedisClient(url=config.REDIS_URL))
    return StaticFeatureFlagClient(config.FEATURE_FLAGS)


async def resolve_catalog_engine(config: Settings) -> AsyncEngine | None:
    """Return a connected engine for database mode, or None for file mode."""
    requested = CatalogMode.DATABASE if config.USE_DATABASE else CatalogMode.FILE

    if requested is CatalogMode.FILE:
        logger.info("Database mode disabled, using JSON file catalog")
        BusinessEvents.catalog_mode_resolved(
            mode=CatalogMode.FILE.value, requested_mode=requested.value
        )
        return None

    if not config.DB_CONNECTION_STRING:
        logger.warning("DB_CONNECTION_STRING not set, falling back to JSON file catalog")
        BusinessEvents.catalog_mode_resolved(
            mode=CatalogMode.FILE.value,
            requested_mode=requested.value,
            reason="missing_connection_string",
        )
        return None

    logger.info("Initializing database connection for product catalog")
    engine: AsyncEngine | None = None
    try:
        engine = create_catalog_engine(
            config.DB_CONNECTION_STRING,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_recycle=config.DB_POOL_RECYCLE_SEC,
        )
        await init_db(engine, timeout=config.DB_CONNECT_TIMEOUT_SEC)
    except Exception as e:
        if engine is not None:
            await engine.dispose()
        logger.error(
            f"Failed to initialize database: {e!r}. Falling back to JSON file catalog."
        )
        BusinessEvents.catalog_mode_resolved(
            mode=CatalogMode.FILE.value,
            requested_mode=requested.value,
            reason="database_unavailable",
            error=repr(e),
        )
        return None

    BusinessEvents.catalog_mode_resolved(
        mode=CatalogMode.DATABASE.value, requested_mode=requested.value
    )
    return engine


async def build_catalog_runtime(
    config: Settings | None = None,
) -> CatalogRuntimeComponents:
    """Resolve the catalog mode and start whatever it needs."""
    config = config or settings
    feature_flags = build_feature_flag_client(config)
    engine = await resolve_catalog_engine(config)

    store: CatalogStore | None = None
    source: ProductCatalogSource
    if engine is not None:
        source = PostgreSQLProductCatalogSource(
            create_session_factory(engine),
            ProductMapper(),
            query_timeout=config.DB_QUERY_TIMEOUT_SEC,
        )
    else:
        store = CatalogStore(
            Path(config.PRODUCTS_DIR),
            file_extension=config.PRODUCTS_FILE_EXTENSION,
            reload_interval=config.PRODUCT_CATALOG_RELOAD_INTERVAL,
        )
        await store.start()
        source = FileProductCatalogSource(store)

    return CatalogRuntimeComponents(
        service=ProductCatalogService(source, feature_flags),
        source=source,
        feature_flags=feature_flags,
        store=store,
        engine=engine,
    )
