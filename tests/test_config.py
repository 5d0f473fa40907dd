from pathlib import Path

import pytest

from catalogkit.config import load_catalog_config
from catalogkit.models import DuplicatePolicy


def test_defaults(tmp_path):
    config = load_catalog_config(tmp_path, {})
    assert config.catalog_file == tmp_path / "products.json"
    assert config.image_dir == tmp_path / "public" / "images"
    assert config.backups == 2
    assert config.recover_from_backup is False
    assert config.duplicate_ids is DuplicatePolicy.ALLOW
    assert config.page_size == 10
    assert config.catalog_secret == ""
    assert config.api_port == 5000
    assert config.force_tls is False
    assert "http://localhost" in config.allowed_origins
    assert config.max_content_length == 5 * 1024 * 1024


def test_env_overrides(tmp_path):
    absolute = tmp_path / "elsewhere" / "catalog.json"
    config = load_catalog_config(
        tmp_path,
        {
            "CATALOG_FILE": str(absolute),
            "IMAGE_DIR": "uploads",
            "CATALOG_BACKUPS": "0",
            "CATALOG_RECOVER_FROM_BACKUP": "yes",
            "CATALOG_DUPLICATE_IDS": "Reject",
            "CATALOG_PAGE_SIZE": "25",
            "CATALOG_SECRET": " s3cret ",
            "ALLOWED_ORIGINS": "https://shop.example, https://admin.example",
            "FORCE_TLS": "true",
            "API_PORT": "8080",
            "LOG_LEVEL": "debug",
        },
    )
    assert config.catalog_file == absolute
    assert config.image_dir == Path(tmp_path) / "uploads"
    assert config.backups == 0
    assert config.recover_from_backup is True
    assert config.duplicate_ids is DuplicatePolicy.REJECT
    assert config.page_size == 25
    assert config.catalog_secret == "s3cret"
    assert config.allowed_origins == ("https://shop.example", "https://admin.example")
    assert config.force_tls is True
    assert config.api_port == 8080
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"CATALOG_DUPLICATE_IDS": "sometimes"},
        {"CATALOG_PAGE_SIZE": "0"},
        {"CATALOG_BACKUPS": "two"},
    ],
)
def test_invalid_values_raise(tmp_path, env):
    with pytest.raises(ValueError):
        load_catalog_config(tmp_path, env)


def test_reads_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.delenv("CATALOG_PAGE_SIZE", raising=False)
    (tmp_path / ".env").write_text("CATALOG_PAGE_SIZE=4\n", encoding="utf-8")
    config = load_catalog_config(tmp_path)
    assert config.page_size == 4
    monkeypatch.delenv("CATALOG_PAGE_SIZE", raising=False)
