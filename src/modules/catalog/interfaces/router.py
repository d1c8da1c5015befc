"""Catalog API routes."""

from fastapi import APIRouter, Depends, Query

from src.core.interfaces.http.response import ErrorResponse
from src.modules.catalog.application.dependencies import get_product_catalog_service
from src.modules.catalog.application.services import ProductCatalogService
from src.modules.catalog.domain.entities import Product
from src.modules.catalog.interfaces.schemas import (
    ListProductsResponse,
    MoneyResponse,
    ProductResponse,
    SearchProductsResponse,
)

router = APIRouter(prefix="/products", tags=["products"])


def _to_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        picture=product.picture,
        price_usd=MoneyResponse(
            currency_code=product.price_usd.currency_code,
            units=product.price_usd.units,
            nanos=product.price_usd.nanos,
        ),
        categories=list(product.categories),
    )


@router.get(
    "",
    response_model=ListProductsResponse,
    summary="获取商品列表",
    description="返回当前数据源中的全部商品",
    responses={500: {"model": ErrorResponse}},
)
async def list_products(
    service: ProductCatalogService = Depends(get_product_catalog_service),
) -> ListProductsResponse:
    """List all products."""
    products = await service.list_products()
    return ListProductsResponse(
        products=[_to_product_response(product) for product in products]
    )


@router.get(
    "/search",
    response_model=SearchProductsResponse,
    summary="搜索商品",
    description="按名称或描述做大小写不敏感的子串匹配，空查询返回全部商品",
    responses={500: {"model": ErrorResponse}},
)
async def search_products(
    query: str = Query("", description="搜索关键字"),
    service: ProductCatalogService = Depends(get_product_catalog_service),
) -> SearchProductsResponse:
    """Search products."""
    results = await service.search_products(query)
    return SearchProductsResponse(
        results=[_to_product_response(product) for product in results]
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="获取商品详情",
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_product(
    product_id: str,
    service: ProductCatalogService = Depends(get_product_catalog_service),
) -> ProductResponse:
    """Get product by id."""
    product = await service.get_product(product_id)
    return _to_product_response(product)
