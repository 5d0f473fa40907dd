"""Persistence core for the product catalog service."""

from .codec import FernetCodec, JsonCodec, codec_for_secret  # noqa: F401
from .config import CatalogConfig, load_catalog_config  # noqa: F401
from .errors import (  # noqa: F401
    CatalogError,
    CorruptDataError,
    DuplicateProductError,
    ProductNotFoundError,
    StoreError,
)
from .models import DuplicatePolicy, Product  # noqa: F401
from .query import filter_active, is_active, paginate  # noqa: F401
from .storage import CatalogStore  # noqa: F401

__all__ = [
    "CatalogConfig",
    "CatalogError",
    "CatalogStore",
    "CorruptDataError",
    "DuplicatePolicy",
    "DuplicateProductError",
    "FernetCodec",
    "JsonCodec",
    "Product",
    "ProductNotFoundError",
    "StoreError",
    "codec_for_secret",
    "filter_active",
    "is_active",
    "load_catalog_config",
    "paginate",
]
