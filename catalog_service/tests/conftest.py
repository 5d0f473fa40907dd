import pytest

from catalog_service import app as flask_app


@pytest.fixture(autouse=True)
def configure_test_env(tmp_path, monkeypatch):
    flask_app.app.config.update(TESTING=True)
    product_file = tmp_path / "products.json"
    image_dir = tmp_path / "images"
    monkeypatch.setattr(flask_app, "PRODUCT_FILE", product_file)
    monkeypatch.setattr(flask_app, "IMAGE_DIR", image_dir)
    monkeypatch.setattr(flask_app, "_PRODUCT_CATALOG", None)
    talisman = flask_app.app.extensions.get("talisman")
    if talisman:
        talisman.force_https = False
    yield product_file


@pytest.fixture
def client():
    return flask_app.app.test_client()
