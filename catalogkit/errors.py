"""Exception hierarchy shared by the catalog store and the product service."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog failures."""


class StoreError(CatalogError, RuntimeError):
    """Raised when the durable catalog cannot be read or written."""


class CorruptDataError(StoreError):
    """Raised when stored bytes exist but do not decode to a catalog."""


class ProductNotFoundError(CatalogError, LookupError):
    """No product with the requested identifier exists."""

    def __init__(self, product_id: object):
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class DuplicateProductError(CatalogError):
    """A product with the same identifier is already stored."""

    def __init__(self, product_id: object):
        super().__init__(f"Product '{product_id}' already exists")
        self.product_id = product_id
