"""Catalog source implementations."""

import asyncio
from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import sessionmaker
from sqlmodel import col, select

from src.modules.catalog.domain.entities import CatalogMode, Product
from src.modules.catalog.domain.exceptions import (
    CatalogInternalError,
    ProductNotFoundError,
)
from src.modules.catalog.domain.repository import ProductCatalogSource
from src.modules.catalog.infrastructure.catalog_store import CatalogStore
from src.modules.catalog.infrastructure.mappers import ProductMapper
from src.modules.catalog.infrastructure.models import ProductModel

_LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches as a literal substring."""
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


class FileProductCatalogSource(ProductCatalogSource):
    """Serve queries from the store's current snapshot."""

    mode = CatalogMode.FILE

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    async def list_products(self) -> list[Product]:
        return list(self.store.current())

    async def get_product(self, product_id: str) -> Product:
        product = self.store.current().find(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def search_products(self, query: str) -> list[Product]:
        return self.store.current().search(query)


class PostgreSQLProductCatalogSource(ProductCatalogSource):
    """PostgreSQL catalog source implementation.

    每次调用使用独立的会话，不跨调用持有事务；查询带超时并响应任务取消。
    """

    mode = CatalogMode.DATABASE

    def __init__(
        self,
        session_factory: sessionmaker,
        mapper: ProductMapper,
        *,
        query_timeout: float,
    ) -> None:
        self.session_factory = session_factory
        self.mapper = mapper
        self.query_timeout = query_timeout
        self.logger = logger

    async def list_products(self) -> list[Product]:
        statement = select(ProductModel).order_by(col(ProductModel.name).asc())
        return await self._fetch(statement, operation="list products")

    async def get_product(self, product_id: str) -> Product:
        statement = select(ProductModel).where(ProductModel.id == product_id)
        products = await self._fetch(statement, operation="get product")
        if not products:
            raise ProductNotFoundError(product_id)
        return products[0]

    async def search_products(self, query: str) -> list[Product]:
        pattern = f"%{escape_like(query)}%"
        statement = (
            select(ProductModel)
            .where(
                or_(
                    col(ProductModel.name).ilike(pattern, escape=_LIKE_ESCAPE),
                    col(ProductModel.description).ilike(pattern, escape=_LIKE_ESCAPE),
                )
            )
            .order_by(col(ProductModel.name).asc())
        )
        return await self._fetch(statement, operation="search products")

    async def _fetch(self, statement: Any, *, operation: str) -> list[Product]:
        try:
            async with asyncio.timeout(self.query_timeout):
                async with self.session_factory() as session:
                    result = await session.execute(statement)
                    models = result.scalars().all()
        except Exception as e:
            self.logger.error(f"Failed to {operation} from database: {e!r}")
            raise CatalogInternalError(f"Failed to {operation}") from e
        return self._to_domain_list(models)

    def _to_domain_list(self, models: list[ProductModel]) -> list[Product]:
        products: list[Product] = []
        for model in models:
            try:
                products.append(self.mapper.to_domain(model))
            except ValidationError as e:
                # 单行数据异常只跳过该行
                self.logger.warning(f"Skipping invalid product row {model.id!r}: {e}")
        return products
