"""Catalog application services."""

from loguru import logger

from src.core.domain.ports.feature_flags import FeatureFlagClient
from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.domain.entities import CatalogMode, Product
from src.modules.catalog.domain.exceptions import CatalogInternalError
from src.modules.catalog.domain.repository import ProductCatalogSource

# 故障注入：功能开关打开时，对该商品的 GetProduct 请求必定失败
FAILURE_PRODUCT_ID = "OLJCESPC7Z"
FAILURE_FLAG_KEY = "productCatalogFailure"
FAILURE_MESSAGE = "Error: Product Catalog Fail Feature Flag Enabled"


class ProductCatalogService:
    """Query façade over the catalog source selected at startup."""

    def __init__(
        self,
        source: ProductCatalogSource,
        feature_flags: FeatureFlagClient,
    ) -> None:
        self.source = source
        self.feature_flags = feature_flags

    @property
    def mode(self) -> CatalogMode:
        return self.source.mode

    async def list_products(self) -> list[Product]:
        """List every product in the active source."""
        return await self.source.list_products()

    async def get_product(self, product_id: str) -> Product:
        """Get a product by id.

        Raises:
            CatalogInternalError: 故障注入开关生效，或数据源故障
            ProductNotFoundError: 商品不存在
        """
        if await self._check_product_failure(product_id):
            BusinessEvents.product_failure_injected(
                product_id=product_id, flag_key=FAILURE_FLAG_KEY
            )
            raise CatalogInternalError(FAILURE_MESSAGE)

        product = await self.source.get_product(product_id)
        BusinessEvents.product_found(
            product_id=product.id,
            product_name=product.name,
            source=self.mode.value,
        )
        return product

    async def search_products(self, query: str) -> list[Product]:
        """Case-insensitive substring search; an empty query matches everything."""
        return await self.source.search_products(query)

    async def _check_product_failure(self, product_id: str) -> bool:
        if product_id != FAILURE_PRODUCT_ID:
            return False
        try:
            return await self.feature_flags.get_boolean_value(
                FAILURE_FLAG_KEY, False, {"productId": product_id}
            )
        except Exception as e:
            logger.warning(f"Feature flag '{FAILURE_FLAG_KEY}' evaluation failed: {e!r}")
            return False
