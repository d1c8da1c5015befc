#!/usr/bin/env python3
"""Load the JSON product catalog into PostgreSQL.

Usage:
  python scripts/seed_products.py
  python scripts/seed_products.py --products-dir ./products
  python scripts/seed_products.py --create-table
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import structlog
from sqlmodel import SQLModel

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config import Settings  # noqa: E402
from src.core.infrastructure.database.session import (  # noqa: E402
    create_catalog_engine,
    create_session_factory,
    init_db,
)
from src.modules.catalog.infrastructure.catalog_store import CatalogStore  # noqa: E402
from src.modules.catalog.infrastructure.mappers import ProductMapper  # noqa: E402
from src.modules.catalog.infrastructure.models import ProductModel  # noqa: E402

logger = structlog.get_logger(__name__)


async def seed_products(
    settings: Settings, products_dir: Path, create_table: bool
) -> int:
    if not settings.DB_CONNECTION_STRING:
        raise ValueError("DB_CONNECTION_STRING is empty.")

    store = CatalogStore(products_dir, file_extension=settings.PRODUCTS_FILE_EXTENSION)
    snapshot = store.load()
    logger.info(
        "seed_products.loaded",
        products_dir=str(products_dir),
        product_count=len(snapshot),
    )

    engine = create_catalog_engine(settings.DB_CONNECTION_STRING)
    try:
        await init_db(engine, timeout=settings.DB_CONNECT_TIMEOUT_SEC)
        if create_table:
            async with engine.begin() as conn:
                await conn.run_sync(
                    SQLModel.metadata.create_all, tables=[ProductModel.__table__]
                )
            logger.info("seed_products.table_ready", table=ProductModel.__tablename__)

        mapper = ProductMapper()
        session_factory = create_session_factory(engine)
        async with session_factory() as session:
            for product in snapshot:
                await session.merge(mapper.to_model(product))
            await session.commit()
    except Exception:
        logger.exception("seed_products.failed")
        raise
    finally:
        await engine.dispose()

    logger.info("seed_products.done", product_count=len(snapshot))
    return len(snapshot)


def _parse_args(settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the products table")
    parser.add_argument(
        "--products-dir",
        type=Path,
        default=Path(settings.PRODUCTS_DIR),
        help="Directory containing product JSON files (defaults to PRODUCTS_DIR).",
    )
    parser.add_argument(
        "--create-table",
        action="store_true",
        help="Create the products table if it does not exist.",
    )
    return parser.parse_args()


def main() -> None:
    settings = Settings()
    args = _parse_args(settings)
    asyncio.run(seed_products(settings, args.products_dir, args.create_table))


if __name__ == "__main__":
    main()
