"""Catalog module application dependencies."""

from typing import NoReturn

from src.modules.catalog.application.services import ProductCatalogService


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_product_catalog_service() -> ProductCatalogService:
    _missing_dependency("ProductCatalogService")
