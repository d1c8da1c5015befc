"""Catalog source interface."""

from abc import ABC, abstractmethod

from src.modules.catalog.domain.entities import CatalogMode, Product


class ProductCatalogSource(ABC):
    """商品数据来源端口（文件 / 数据库两种实现，启动时二选一）。"""

    mode: CatalogMode

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """List all products."""
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Product:
        """Get product by exact id.

        Raises:
            ProductNotFoundError: 不存在该商品
            CatalogInternalError: 数据源故障
        """
        pass

    @abstractmethod
    async def search_products(self, query: str) -> list[Product]:
        """Case-insensitive substring search over name and description."""
        pass
