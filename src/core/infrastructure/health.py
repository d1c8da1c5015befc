"""Health check result types.

/health 端点汇总的各组件状态都用这些模型表示。
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    DEGRADED = "degraded"


class _ComponentHealth(BaseModel):
    status: HealthStatus = Field(..., description="健康状态")
    error: str | None = Field(None, description="错误信息")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class DatabaseHealthResult(_ComponentHealth):
    connected: bool = Field(..., description="是否已连接")
    version: str | None = Field(None, description="PostgreSQL 版本")


class RedisHealthResult(_ComponentHealth):
    connected: bool = Field(..., description="是否已连接")
    version: str | None = Field(None, description="Redis 版本")


class CatalogHealthResult(_ComponentHealth):
    """文件模式下商品目录快照的状态。"""

    product_count: int = Field(..., description="当前快照中的商品数")
    loaded_at: datetime | None = Field(None, description="当前快照加载时间")
    consecutive_failures: int = Field(0, description="连续加载失败次数")
