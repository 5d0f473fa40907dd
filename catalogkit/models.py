"""Product record and catalog-wide policies."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping

# Wire name -> attribute name. Wire names are what lands in products.json.
WIRE_FIELDS: Dict[str, str] = {
    "productId": "product_id",
    "productName": "product_name",
    "productDescription": "product_description",
    "isActive": "is_active",
    "imagePath": "image_path",
}


class DuplicatePolicy(str, Enum):
    """How ``create`` treats a ``productId`` that is already stored."""

    ALLOW = "allow"
    REJECT = "reject"


def check_json_value(value: Any, where: str) -> None:
    """Raise ``TypeError`` unless ``value`` survives a JSON round trip unchanged."""

    if value is None or isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeError(f"{where} must be a finite number, got {value!r}")
        return
    if isinstance(value, list):
        for idx, item in enumerate(value):
            check_json_value(item, f"{where}[{idx}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{where} keys must be strings, got {type(key).__name__}")
            check_json_value(item, f"{where}.{key}")
        return
    raise TypeError(f"{where} must be a JSON value, got {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class Product:
    """A single catalog entry.

    ``is_active`` keeps whatever JSON value it was given; only the boolean
    ``True`` makes a product visible in listings. Keys outside the known
    fields are carried in ``extras`` so rewriting the catalog never drops them.
    """

    product_id: str | None = None
    product_name: str | None = None
    product_description: str | None = None
    is_active: Any = None
    image_path: str | None = ""
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key, attr in WIRE_FIELDS.items():
            check_json_value(getattr(self, attr), key)
        clash = WIRE_FIELDS.keys() & self.extras.keys()
        if clash:
            raise ValueError(f"extras cannot hold product fields: {sorted(clash)}")
        check_json_value(self.extras, "extras")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        known = {attr: data[key] for key, attr in WIRE_FIELDS.items() if key in data}
        extras = {key: value for key, value in data.items() if key not in WIRE_FIELDS}
        return cls(**known, extras=extras)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for key, attr in WIRE_FIELDS.items():
            value = getattr(self, attr)
            # Unset fields stay absent; imagePath defaults to "" so None is kept.
            if value is None and attr != "image_path":
                continue
            payload[key] = value
        payload.update(self.extras)
        return payload

    def merged(self, updates: Mapping[str, Any]) -> "Product":
        """Return a copy with the keys present in ``updates`` replaced."""

        changes = {attr: updates[key] for key, attr in WIRE_FIELDS.items() if key in updates}
        extra_updates = {key: value for key, value in updates.items() if key not in WIRE_FIELDS}
        if extra_updates:
            changes["extras"] = {**self.extras, **extra_updates}
        return replace(self, **changes)
