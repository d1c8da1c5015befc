"""Catalog entity-model mappers."""

from src.core.infrastructure.database.mapper import BaseMapper
from src.modules.catalog.domain.entities import Money, Product
from src.modules.catalog.infrastructure.models import ProductModel


class ProductMapper(BaseMapper[Product, ProductModel]):
    """Product entity-model mapper."""

    def to_domain(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            description=model.description or "",
            picture=model.picture or "",
            price_usd=Money(
                currency_code=model.price_currency_code,
                units=model.price_units,
                nanos=model.price_nanos,
            ),
            categories=tuple(model.categories or ()),
        )

    def to_model(self, entity: Product) -> ProductModel:
        return ProductModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            picture=entity.picture,
            price_currency_code=entity.price_usd.currency_code,
            price_units=entity.price_usd.units,
            price_nanos=entity.price_usd.nanos,
            categories=list(entity.categories),
        )
