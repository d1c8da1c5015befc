"""Tests for the PostgreSQL catalog source (mocked sessions)."""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from src.modules.catalog.domain.entities import CatalogMode, Money, Product
from src.modules.catalog.domain.exceptions import (
    CatalogInternalError,
    ProductNotFoundError,
)
from src.modules.catalog.infrastructure.mappers import ProductMapper
from src.modules.catalog.infrastructure.models import ProductModel
from src.modules.catalog.infrastructure.repositories import (
    PostgreSQLProductCatalogSource,
    escape_like,
)

pytestmark = pytest.mark.anyio


def _model(product_id: str, name: str, description: str = "") -> ProductModel:
    return ProductModel(
        id=product_id,
        name=name,
        description=description,
        picture=f"{product_id}.jpg",
        price_currency_code="USD",
        price_units=21,
        price_nanos=950000000,
        categories=["accessories"],
    )


def _session_with_rows(rows: list[ProductModel]) -> AsyncMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    session = AsyncMock()
    session.execute = AsyncMock(return_value=result)
    return session


def _factory(session: AsyncMock):
    @asynccontextmanager
    async def session_factory():
        yield session

    return session_factory


def _source(session: AsyncMock, query_timeout: float = 5.0):
    return PostgreSQLProductCatalogSource(
        _factory(session), ProductMapper(), query_timeout=query_timeout
    )


def _compiled(session: AsyncMock):
    statement = session.execute.await_args.args[0]
    return statement.compile(dialect=postgresql.dialect())


async def test_list_products_maps_rows_in_order() -> None:
    session = _session_with_rows([_model("B", "Alpha"), _model("A", "Beta")])
    source = _source(session)

    products = await source.list_products()

    assert [p.id for p in products] == ["B", "A"]
    assert products[0].price_usd == Money(
        currency_code="USD", units=21, nanos=950000000
    )
    assert products[0].categories == ("accessories",)
    assert "ORDER BY products.name ASC" in str(_compiled(session))
    assert source.mode is CatalogMode.DATABASE


async def test_get_product_found() -> None:
    session = _session_with_rows([_model("L9ECAV7KIM", "Lens Cleaning Kit")])

    product = await _source(session).get_product("L9ECAV7KIM")

    assert isinstance(product, Product)
    assert product.name == "Lens Cleaning Kit"
    compiled = _compiled(session)
    assert "products.id = " in str(compiled)
    assert "L9ECAV7KIM" in compiled.params.values()


async def test_get_product_not_found() -> None:
    session = _session_with_rows([])

    with pytest.raises(ProductNotFoundError):
        await _source(session).get_product("NOPE")


async def test_search_uses_ilike_with_escaped_pattern() -> None:
    session = _session_with_rows([_model("A", "50% Off Filter")])

    results = await _source(session).search_products("50%")

    assert [p.id for p in results] == ["A"]
    compiled = _compiled(session)
    sql = str(compiled)
    assert sql.count("ILIKE") == 2
    assert "ORDER BY products.name ASC" in sql
    assert "%50\\%%" in compiled.params.values()


async def test_list_products_keeps_row_with_empty_name() -> None:
    session = _session_with_rows([_model("A", ""), _model("B", "Beta")])

    products = await _source(session).list_products()

    assert [(p.id, p.name) for p in products] == [("A", ""), ("B", "Beta")]


async def test_invalid_row_is_skipped_not_fatal() -> None:
    bad = _model("BAD", "Broken Price")
    bad.price_nanos = 2_000_000_000
    session = _session_with_rows([bad, _model("OK", "Fine")])

    products = await _source(session).search_products("")

    assert [p.id for p in products] == ["OK"]


async def test_get_product_with_invalid_row_is_not_found() -> None:
    bad = _model("", "No Id")
    session = _session_with_rows([bad])

    with pytest.raises(ProductNotFoundError):
        await _source(session).get_product("")


async def test_database_error_becomes_internal_error() -> None:
    session = AsyncMock()
    session.execute = AsyncMock(
        side_effect=OperationalError("SELECT 1", {}, Exception("connection lost"))
    )

    with pytest.raises(CatalogInternalError) as exc_info:
        await _source(session).list_products()

    assert exc_info.value.message == "Failed to list products"
    assert isinstance(exc_info.value.__cause__, OperationalError)


async def test_query_timeout_becomes_internal_error() -> None:
    async def slow_execute(_statement):
        await asyncio.sleep(1)

    session = AsyncMock()
    session.execute = AsyncMock(side_effect=slow_execute)

    with pytest.raises(CatalogInternalError) as exc_info:
        await _source(session, query_timeout=0.01).search_products("kit")

    assert isinstance(exc_info.value.__cause__, TimeoutError)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("telescope", "telescope"),
        ("50%", "50\\%"),
        ("a_b", "a\\_b"),
        ("back\\slash", "back\\\\slash"),
        ("", ""),
    ],
)
def test_escape_like(raw: str, expected: str) -> None:
    assert escape_like(raw) == expected


def test_mapper_roundtrip_fields() -> None:
    product = Product(
        id="0PUK6V6EV0",
        name="Solar System Color Imager",
        price_usd=Money(currency_code="USD", units=175, nanos=0),
        categories=("accessories", "telescopes"),
    )

    model = ProductMapper().to_model(product)

    assert model.price_units == 175
    assert model.categories == ["accessories", "telescopes"]
    assert ProductMapper().to_domain(model) == product
