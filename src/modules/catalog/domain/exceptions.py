"""Catalog domain exceptions."""

from src.core.domain.exceptions import EntityNotFoundError, InternalError


class ProductNotFoundError(EntityNotFoundError):
    """Raised when no product matches the requested id."""

    def __init__(self, product_id: str):
        super().__init__("Product", product_id)
        self.product_id = product_id


class CatalogInternalError(InternalError):
    """Raised when the catalog source fails, or a failure is injected."""


class CatalogLoadError(Exception):
    """Base error for loading the file catalog. Never surfaced to callers."""


class CatalogReadError(CatalogLoadError):
    """Raised when the products directory or a product file cannot be read."""


class CatalogParseError(CatalogLoadError):
    """Raised when a product file does not match the expected schema."""
