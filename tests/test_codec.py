import json
from datetime import datetime
from decimal import Decimal

import pytest

from catalogkit.codec import FernetCodec, JsonCodec, codec_for_secret
from catalogkit.errors import CorruptDataError
from catalogkit.models import Product


CATALOG = [
    Product(product_id="p1", product_name="Desk Lamp", product_description="Warm light", is_active=True),
    Product(product_id="p2", product_name="Kettle", product_description="", is_active=False, image_path="/images/k.png"),
    Product(product_id="p3", product_name="Café ☕", product_description=None, is_active="true"),
    Product(product_id="p4", is_active=True, extras={"price": 9.5, "tags": ["x", None], "meta": {"n": 1}}),
]


@pytest.mark.parametrize("codec", [JsonCodec(), FernetCodec("round-trip-secret")])
def test_round_trip(codec):
    assert codec.decode(codec.encode(CATALOG)) == CATALOG
    assert codec.decode(codec.encode([])) == []


def test_empty_bytes_decode_to_empty_catalog():
    assert JsonCodec().decode(b"") == []
    assert FernetCodec("secret").decode(b"") == []


@pytest.mark.parametrize(
    "raw",
    [b"{corrupt", b'{"bad": true}', b"[1, 2]", b'"text"', b"\xff\xfe\x00"],
)
def test_invalid_bytes_raise_corrupt_data(raw):
    with pytest.raises(CorruptDataError):
        JsonCodec().decode(raw)


def test_fernet_rejects_foreign_key():
    blob = FernetCodec("first").encode(CATALOG)
    with pytest.raises(CorruptDataError):
        FernetCodec("second").decode(blob)


@pytest.mark.parametrize(
    "value",
    [("a", "b"), Decimal("1"), datetime(2024, 1, 1), float("nan"), {1: "x"}, [object()]],
)
def test_product_rejects_values_json_cannot_round_trip(value):
    with pytest.raises(TypeError):
        Product(product_id="p9", product_name=value)
    with pytest.raises(TypeError):
        Product(product_id="p9", is_active=value)
    with pytest.raises(TypeError):
        Product(product_id="p9", extras={"price": value})


def test_unknown_stored_keys_survive_rewrite():
    raw = json.dumps(
        [{"productId": "old", "productName": "Lamp", "isActive": True, "imagePath": "", "price": 9, "tags": ["a"]}]
    ).encode("utf-8")
    codec = JsonCodec()
    [product] = codec.decode(raw)
    assert product.extras == {"price": 9, "tags": ["a"]}
    rewritten = json.loads(codec.encode([product]))
    assert rewritten == json.loads(raw)


def test_missing_keys_are_not_written_back_as_null():
    codec = JsonCodec()
    [product] = codec.decode(b'[{"productId": "p1", "imagePath": ""}]')
    assert product.product_description is None
    assert json.loads(codec.encode([product])) == [{"productId": "p1", "imagePath": ""}]
    assert codec.decode(codec.encode([Product(product_id="p2", image_path=None)]))[0].image_path is None


def test_non_finite_numbers_in_file_are_corrupt():
    with pytest.raises(CorruptDataError):
        JsonCodec().decode(b'[{"productId": "p1", "isActive": NaN}]')


def test_codec_for_secret():
    assert isinstance(codec_for_secret(""), JsonCodec)
    assert not isinstance(codec_for_secret(""), FernetCodec)
    assert isinstance(codec_for_secret("abc"), FernetCodec)


def test_fernet_requires_secret():
    with pytest.raises(ValueError):
        FernetCodec("")
