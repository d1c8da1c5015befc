"""Application configuration."""

import json
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RELOAD_INTERVAL = 10


def parse_reload_interval(v: Any) -> int:
    """无法解析或非正数的刷新间隔一律回退为默认值。"""
    try:
        interval = int(v)
    except (TypeError, ValueError):
        return DEFAULT_RELOAD_INTERVAL
    if interval <= 0:
        return DEFAULT_RELOAD_INTERVAL
    return interval


def parse_feature_flags(v: Any) -> dict[str, Any]:
    if isinstance(v, str):
        v = json.loads(v) if v.strip() else {}
    if isinstance(v, dict):
        # 值交给 dict[str, bool] 校验："false" -> False，无法识别的值报错
        return {str(key): value for key, value in v.items()}
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    PROJECT_NAME: str = "product-catalog"
    SERVER_PORT: int = Field(
        default=3550,
        validation_alias=AliasChoices("SERVER_PORT", "PRODUCT_CATALOG_PORT"),
    )
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Catalog (file source)
    PRODUCTS_DIR: str = "./products"
    PRODUCTS_FILE_EXTENSION: str = ".json"
    PRODUCT_CATALOG_RELOAD_INTERVAL: Annotated[
        int, BeforeValidator(parse_reload_interval)
    ] = DEFAULT_RELOAD_INTERVAL

    # Catalog (database source)
    USE_DATABASE: bool = False
    DB_CONNECTION_STRING: str | None = None
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 20  # 最多 25 个连接
    DB_POOL_RECYCLE_SEC: int = 300  # 连接最长存活 5 分钟
    DB_CONNECT_TIMEOUT_SEC: float = 5.0
    DB_QUERY_TIMEOUT_SEC: float = 10.0

    # Feature Flags
    FEATURE_FLAG_BACKEND: Literal["static", "redis"] = "static"
    FEATURE_FLAGS: Annotated[dict[str, bool], BeforeValidator(parse_feature_flags)] = {}

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"


settings = Settings()
