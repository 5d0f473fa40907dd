"""Pure helpers for listing the catalog."""

from __future__ import annotations

from typing import Iterable, List, Sequence, TypeVar

from .models import Product

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


def is_active(product: Product) -> bool:
    # Only the boolean True counts; "true", 1, etc. stay hidden.
    return product.is_active is True


def filter_active(catalog: Iterable[Product]) -> List[Product]:
    return [product for product in catalog if is_active(product)]


def paginate(items: Sequence[T], page: int, limit: int = DEFAULT_PAGE_SIZE) -> List[T]:
    """Return the 1-indexed ``page`` of ``items``; pages past the end are empty."""

    if limit < 1:
        raise ValueError("limit must be at least 1")
    offset = (max(1, page) - 1) * limit
    return list(items[offset : offset + limit])
