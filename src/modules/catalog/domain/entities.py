"""Catalog domain entities."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class CatalogMode(str, Enum):
    """商品数据来源，启动时确定，进程生命周期内不变。"""

    FILE = "file"
    DATABASE = "database"


class _CatalogValue(BaseModel):
    # 字段名兼容 lowerCamelCase（protobuf JSON）与 snake_case
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Money(_CatalogValue):
    """Amount of money with its currency code."""

    currency_code: str = Field(default="", description="ISO 4217 货币代码")
    units: int = Field(default=0, description="整数部分")
    nanos: int = Field(
        default=0,
        ge=-999_999_999,
        le=999_999_999,
        description="小数部分（10^-9 单位）",
    )


class Product(_CatalogValue):
    """Catalog product. Immutable once loaded."""

    # id 必须非空；name 允许为空串
    id: str = Field(..., min_length=1, description="商品ID")
    name: str = Field(..., description="商品名称")
    description: str = Field(default="", description="商品描述")
    picture: str = Field(default="", description="图片路径")
    price_usd: Money = Field(default_factory=Money, description="价格")
    categories: tuple[str, ...] = Field(default=(), description="分类（保持来源顺序）")

    def matches(self, query: str) -> bool:
        """名称或描述是否包含 query（大小写不敏感，空串匹配所有商品）。"""
        needle = query.lower()
        return needle in self.name.lower() or needle in self.description.lower()


@dataclass(frozen=True)
class CatalogSnapshot:
    """One complete, consistent load of all products."""

    products: tuple[Product, ...] = ()
    loaded_at: datetime = field(default_factory=_utc_now)

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products)

    def find(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def search(self, query: str) -> list[Product]:
        return [product for product in self.products if product.matches(query)]
