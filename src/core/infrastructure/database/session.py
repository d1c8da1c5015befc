"""Database engine and session management.

数据库是可选依赖（仅 database 模式使用），因此引擎在启动时按需创建，
而不是在模块导入时创建。
"""

import asyncio
import re

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from src.core.config import settings
from src.core.infrastructure.health import DatabaseHealthResult, HealthStatus

_SCHEME_RE = re.compile(r"^(postgres|postgresql)(\+[a-z0-9_]+)?://", re.IGNORECASE)


def normalize_database_url(connection_string: str) -> str:
    """Accept libpq-style URLs (``postgres://...``) and pin the psycopg driver."""
    s = connection_string.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return _SCHEME_RE.sub("postgresql+psycopg://", s, count=1)


def create_catalog_engine(
    connection_string: str,
    *,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_recycle: int | None = None,
) -> AsyncEngine:
    """Create the pooled async engine used by the catalog adapter."""
    return create_async_engine(
        normalize_database_url(connection_string),
        echo=False,
        pool_pre_ping=True,
        pool_size=pool_size if pool_size is not None else settings.DB_POOL_SIZE,
        max_overflow=(
            max_overflow if max_overflow is not None else settings.DB_MAX_OVERFLOW
        ),
        pool_recycle=(
            pool_recycle if pool_recycle is not None else settings.DB_POOL_RECYCLE_SEC
        ),
    )


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine, timeout: float | None = None) -> None:
    """Verify the database is reachable."""
    timeout = timeout if timeout is not None else settings.DB_CONNECT_TIMEOUT_SEC
    try:
        async with asyncio.timeout(timeout):
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Failed to connect to database: {e!r}")
        raise


async def check_db_health(engine: AsyncEngine) -> DatabaseHealthResult:
    """检查数据库健康状态。"""
    try:
        async with asyncio.timeout(settings.DB_CONNECT_TIMEOUT_SEC):
            async with engine.connect() as conn:
                result = await conn.execute(text("SELECT version()"))
                version = result.scalar()

        return DatabaseHealthResult(
            status=HealthStatus.OK,
            connected=True,
            version=version.split(",")[0] if version else "unknown",
        )
    except Exception as e:
        logger.warning(f"Database health check failed: {e!r}")
        return DatabaseHealthResult(
            status=HealthStatus.ERROR,
            connected=False,
            error=str(e),
        )
