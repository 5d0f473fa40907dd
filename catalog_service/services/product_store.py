"""Product repository built on the catalog store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Sequence

from catalogkit.codec import CatalogCodec, codec_for_secret
from catalogkit.config import CatalogConfig
from catalogkit.errors import DuplicateProductError, ProductNotFoundError
from catalogkit.models import DuplicatePolicy, Product
from catalogkit.query import DEFAULT_PAGE_SIZE, is_active, paginate
from catalogkit.storage import CatalogStore

logger = logging.getLogger(__name__)


def _index_of(items: Sequence[Product], product_id: Any) -> Optional[int]:
    for idx, item in enumerate(items):
        if item.product_id == product_id:
            return idx
    return None


@dataclass(slots=True)
class ProductCatalog:
    """Create/get/list/update/delete over the product catalog file.

    Every mutation runs inside :meth:`CatalogStore.mutate`, so concurrent
    callers never save over each other's changes. Nothing is cached between
    calls.
    """

    path: str | Path
    backups: int = 2
    codec: CatalogCodec | None = None
    recover_from_backup: bool = False
    duplicate_ids: DuplicatePolicy = DuplicatePolicy.ALLOW
    page_size: int = DEFAULT_PAGE_SIZE
    _store: CatalogStore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._store = CatalogStore(
            self.path,
            codec=self.codec,
            backups=self.backups,
            recover_from_backup=self.recover_from_backup,
            recovery_label="product catalog",
        )

    @classmethod
    def from_config(cls, config: CatalogConfig, path: str | Path | None = None) -> "ProductCatalog":
        return cls(
            path=path or config.catalog_file,
            backups=config.backups,
            codec=codec_for_secret(config.catalog_secret),
            recover_from_backup=config.recover_from_backup,
            duplicate_ids=config.duplicate_ids,
            page_size=config.page_size,
        )

    @property
    def store(self) -> CatalogStore:
        return self._store

    def _check_unique(self, items: Sequence[Product], product_id: Any) -> None:
        if self.duplicate_ids is DuplicatePolicy.REJECT and _index_of(items, product_id) is not None:
            raise DuplicateProductError(product_id)

    # ------------------------------------------------------------------
    # Basic CRUD operations
    # ------------------------------------------------------------------
    def all(self) -> List[Product]:
        return self._store.load()

    def create(self, fields: Mapping[str, Any], image_path: str = "") -> Product:
        product = Product.from_dict(fields).merged({"imagePath": image_path or ""})

        def mutator(items: List[Product]) -> None:
            self._check_unique(items, product.product_id)
            items.append(product)

        self._store.mutate(mutator)
        logger.info("Created product %s", product.product_id)
        return product

    def get(self, product_id: str) -> Product:
        items = self._store.load()
        idx = _index_of(items, product_id)
        if idx is None:
            raise ProductNotFoundError(product_id)
        return items[idx]

    def list(
        self,
        page: int = 1,
        predicate: Callable[[Product], bool] = is_active,
    ) -> List[Product]:
        """Return one page of products accepted by ``predicate``."""

        visible = [product for product in self._store.load() if predicate(product)]
        return paginate(visible, page, self.page_size)

    def update(self, product_id: str, updates: Mapping[str, Any]) -> Product:
        updated: Optional[Product] = None

        def mutator(items: List[Product]) -> None:
            nonlocal updated
            idx = _index_of(items, product_id)
            if idx is None:
                raise ProductNotFoundError(product_id)
            merged = items[idx].merged(updates)
            if merged.product_id != product_id:
                self._check_unique(items, merged.product_id)
            items[idx] = merged
            updated = merged

        self._store.mutate(mutator)
        logger.info("Updated product %s", product_id)
        return updated  # type: ignore[return-value]

    def delete(self, product_id: str) -> Product:
        removed: Optional[Product] = None

        def mutator(items: List[Product]) -> None:
            nonlocal removed
            idx = _index_of(items, product_id)
            if idx is None:
                raise ProductNotFoundError(product_id)
            removed = items.pop(idx)

        self._store.mutate(mutator)
        logger.info("Deleted product %s", product_id)
        return removed  # type: ignore[return-value]
