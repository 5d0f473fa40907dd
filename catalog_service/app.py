"""Flask API for the product catalog.

- Products are persisted to a single local JSON file (optionally encrypted)
  through :class:`ProductCatalog`, which serialises writers and replaces the
  file atomically.
- ``POST``/``PUT`` accept either JSON or multipart form data; an ``image``
  file part is stored under ``IMAGE_DIR`` and referenced by ``imagePath``.
- Stored images are served back from ``/images/<filename>``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_talisman import Talisman
from pydantic import ValidationError

from catalogkit.config import load_catalog_config
from catalogkit.errors import (
    CatalogError,
    CorruptDataError,
    DuplicateProductError,
    ProductNotFoundError,
    StoreError,
)
from catalog_service.images import save_image
from catalog_service.schemas import ProductModel, ProductUpdateModel
from catalog_service.services.product_store import ProductCatalog

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*[+-]?\d+")

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
CONFIG = load_catalog_config(BASE_DIR)
PRODUCT_FILE = CONFIG.catalog_file
IMAGE_DIR = CONFIG.image_dir

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------
app = Flask(__name__)
app.config.update(MAX_CONTENT_LENGTH=CONFIG.max_content_length)
app.json.sort_keys = False

CORS(app, resources={r"/*": {"origins": list(CONFIG.allowed_origins)}})
Talisman(app, content_security_policy=None, force_https=CONFIG.force_tls)

_PRODUCT_CATALOG: ProductCatalog | None = None


def product_catalog() -> ProductCatalog:
    global _PRODUCT_CATALOG
    if _PRODUCT_CATALOG is None or Path(_PRODUCT_CATALOG.path) != Path(PRODUCT_FILE):
        _PRODUCT_CATALOG = ProductCatalog.from_config(CONFIG, path=PRODUCT_FILE)
    return _PRODUCT_CATALOG


def _request_fields() -> Any:
    """Return the submitted fields, or ``None`` when a JSON body cannot be parsed."""

    if request.mimetype in {"multipart/form-data", "application/x-www-form-urlencoded"}:
        return request.form.to_dict()
    if not request.get_data(cache=True):
        return {}
    return request.get_json(force=True, silent=True)


def _page_arg() -> int:
    # Leading digits count, so "2abc" is page 2 and "abc" falls back to 1.
    match = _LEADING_INT.match(request.args.get("page", ""))
    return int(match.group(0)) if match else 1


def _discard_image(image_path: str) -> None:
    if image_path:
        (Path(IMAGE_DIR) / Path(image_path).name).unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Routes - Products
# ---------------------------------------------------------------------------
@app.route("/products", methods=["POST"])
def create_product():
    payload = _request_fields()
    if payload is None:
        return jsonify({"error": "Request body must be valid JSON."}), 400
    try:
        product = ProductModel.model_validate(payload)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    image_path = save_image(request.files.get("image"), IMAGE_DIR)
    try:
        created = product_catalog().create(product.to_fields(), image_path)
    except CatalogError:
        _discard_image(image_path)
        raise
    return jsonify(created.to_dict()), 201


@app.route("/products/<product_id>", methods=["GET"])
def get_product(product_id: str):
    return jsonify(product_catalog().get(product_id).to_dict())


@app.route("/products", methods=["GET"])
def list_products():
    return jsonify([product.to_dict() for product in product_catalog().list(_page_arg())])


@app.route("/products/<product_id>", methods=["PUT"])
def update_product(product_id: str):
    payload = _request_fields()
    if payload is None:
        return jsonify({"error": "Request body must be valid JSON."}), 400
    try:
        changes = ProductUpdateModel.model_validate(payload)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    fields = changes.to_fields()
    image_path = save_image(request.files.get("image"), IMAGE_DIR)
    if image_path:
        fields["imagePath"] = image_path
    try:
        updated = product_catalog().update(product_id, fields)
    except CatalogError:
        _discard_image(image_path)
        raise
    return jsonify(updated.to_dict())


@app.route("/products/<product_id>", methods=["DELETE"])
def delete_product(product_id: str):
    return jsonify(product_catalog().delete(product_id).to_dict())


@app.route("/images/<path:filename>", methods=["GET"])
def product_image(filename: str):
    return send_from_directory(IMAGE_DIR, filename)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
@app.errorhandler(ProductNotFoundError)
def handle_not_found(exc: ProductNotFoundError):
    return jsonify({"error": "Product not found."}), 404


@app.errorhandler(DuplicateProductError)
def handle_duplicate(exc: DuplicateProductError):
    return jsonify({"error": str(exc)}), 409


@app.errorhandler(StoreError)
def handle_store_error(exc: StoreError):
    logger.exception("Catalog storage failure: %s", exc)
    if isinstance(exc, CorruptDataError) or request.method == "GET":
        message = "Failed to read products file."
    else:
        message = "Failed to write products file."
    return jsonify({"error": message}), 500


# ---------------------------------------------------------------------------
# Security headers
# ---------------------------------------------------------------------------
@app.after_request
def secure_headers(resp):
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["X-Frame-Options"] = "DENY"
    return resp


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=CONFIG.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(host=CONFIG.api_host, port=CONFIG.api_port)
