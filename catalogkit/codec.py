"""Byte codecs for the product catalog.

``JsonCodec`` is the plain representation that mirrors the historical
``products.json`` layout (a JSON array of camelCase objects). ``FernetCodec``
encrypts the same payload at rest when a catalog secret is configured.
"""
from __future__ import annotations

import base64
import hashlib
import json
from typing import List, Protocol, Sequence

from cryptography.fernet import Fernet, InvalidToken

from .errors import CorruptDataError
from .models import Product


class CatalogCodec(Protocol):
    def encode(self, catalog: Sequence[Product]) -> bytes: ...

    def decode(self, raw: bytes) -> List[Product]: ...


class JsonCodec:
    """UTF-8 JSON array of product objects."""

    def __init__(self, indent: int | None = 2):
        self.indent = indent

    def encode(self, catalog: Sequence[Product]) -> bytes:
        payload = [product.to_dict() for product in catalog]
        # Product only admits JSON values, so this cannot fail
        return json.dumps(payload, indent=self.indent, ensure_ascii=False, allow_nan=False).encode("utf-8")

    def decode(self, raw: bytes) -> List[Product]:
        if not raw.strip():
            return []
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptDataError(f"Catalog is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise CorruptDataError(f"Catalog must be a JSON array, got {type(data).__name__}")
        products: List[Product] = []
        for idx, item in enumerate(data):
            if not isinstance(item, dict):
                raise CorruptDataError(f"Catalog entry {idx} is not an object")
            try:
                products.append(Product.from_dict(item))
            except (TypeError, ValueError) as exc:
                raise CorruptDataError(f"Catalog entry {idx} is invalid: {exc}") from exc
        return products


def _derive_key(secret: str) -> bytes:
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class FernetCodec(JsonCodec):
    """JSON codec that encrypts payloads using Fernet symmetric encryption."""

    def __init__(self, secret: str, indent: int | None = None):
        if not secret:
            raise ValueError("FernetCodec requires a non-empty secret")
        super().__init__(indent=indent)
        self._fernet = Fernet(_derive_key(secret))

    def encode(self, catalog: Sequence[Product]) -> bytes:
        return self._fernet.encrypt(super().encode(catalog))

    def decode(self, raw: bytes) -> List[Product]:
        if not raw.strip():
            return []
        try:
            decrypted = self._fernet.decrypt(raw)
        except InvalidToken as exc:
            raise CorruptDataError("Catalog could not be decrypted") from exc
        return super().decode(decrypted)


def codec_for_secret(secret: str | None) -> CatalogCodec:
    """Return the encrypted codec when ``secret`` is set, plain JSON otherwise."""

    return FernetCodec(secret) if secret else JsonCodec()
