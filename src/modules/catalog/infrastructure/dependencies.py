"""Catalog module dependencies."""

from fastapi import Depends, Request

from src.modules.catalog.application.services import ProductCatalogService
from src.modules.catalog.infrastructure.runtime_factory import (
    CatalogRuntimeComponents,
)


def get_catalog_runtime(request: Request) -> CatalogRuntimeComponents:
    runtime = getattr(request.app.state, "catalog_runtime", None)
    if runtime is None:
        raise RuntimeError("Catalog runtime is not initialized")
    return runtime


async def get_product_catalog_service(
    runtime: CatalogRuntimeComponents = Depends(get_catalog_runtime),
) -> ProductCatalogService:
    return runtime.service
