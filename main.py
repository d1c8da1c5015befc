"""Product Catalog Service - 商品目录服务入口。"""

from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger

from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.adapters.feature_flag_adapter import (
    RedisFeatureFlagClient,
)
from src.core.infrastructure.database.session import check_db_health
from src.core.infrastructure.health import CatalogHealthResult, HealthStatus
from src.core.infrastructure.logging import setup_logging
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.catalog.application import dependencies as catalog_app_deps
from src.modules.catalog.infrastructure import dependencies as catalog_infra_deps
from src.modules.catalog.infrastructure.catalog_store import CatalogStore
from src.modules.catalog.infrastructure.runtime_factory import (
    CatalogRuntimeComponents,
    build_catalog_runtime,
)

VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting product catalog service...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    runtime = await build_catalog_runtime(settings)
    app.state.catalog_runtime = runtime
    logger.info(f"Product catalog serving from {runtime.mode.value} source")

    yield

    logger.info("Shutting down product catalog service...")
    await runtime.aclose()
    app.state.catalog_runtime = None


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="商品目录服务 - 支持 JSON 文件与 PostgreSQL 两种数据源",
    version=VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[catalog_app_deps.get_product_catalog_service] = (
    catalog_infra_deps.get_product_catalog_service
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


def _catalog_health(store: CatalogStore) -> CatalogHealthResult:
    status = store.status
    if status.consecutive_failures == 0:
        health = HealthStatus.OK
    else:
        # 仍在用上一份快照（或空快照）提供服务
        health = HealthStatus.DEGRADED
    return CatalogHealthResult(
        status=health,
        product_count=status.product_count,
        loaded_at=status.loaded_at,
        error=status.last_error,
        consecutive_failures=status.consecutive_failures,
    )


async def _collect_components(runtime: CatalogRuntimeComponents) -> dict:
    components: dict = {}
    if runtime.store is not None:
        components["catalog"] = _catalog_health(runtime.store).to_dict()
    if runtime.engine is not None:
        components["database"] = (await check_db_health(runtime.engine)).to_dict()
    if isinstance(runtime.feature_flags, RedisFeatureFlagClient):
        components["redis"] = (await runtime.feature_flags.health_check()).to_dict()
    return components


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    检查当前数据源的健康状态：
    - file 模式：最近一次加载是否成功
    - database 模式：PostgreSQL 连接
    - Redis（仅在使用 Redis 功能开关时）

    Returns:
        健康检查结果，包含整体状态和各组件状态
    """
    runtime: CatalogRuntimeComponents | None = getattr(
        app.state, "catalog_runtime", None
    )
    if runtime is None:
        return {
            "status": "unhealthy",
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "components": {},
        }

    components = await _collect_components(runtime)

    # 整体状态判断：
    # - healthy: 所有组件正常
    # - degraded: 数据源可用但有组件异常（Redis 异常时功能开关回退默认值）
    # - unhealthy: 数据库异常
    database = components.get("database")
    if database is not None and database["status"] != HealthStatus.OK.value:
        overall_status = "unhealthy"
    elif all(c["status"] == HealthStatus.OK.value for c in components.values()):
        overall_status = "healthy"
    else:
        overall_status = "degraded"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
        "mode": runtime.mode.value,
        "components": components,
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Product Catalog API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
