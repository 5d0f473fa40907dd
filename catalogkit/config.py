"""Configuration for the catalog service.

Values come from the process environment, optionally primed by a ``.env``
file next to the service. Tests pass an explicit mapping instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv

from .models import DuplicatePolicy
from .query import DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class CatalogConfig:
    """Strongly typed configuration for the catalog service."""

    base_dir: Path
    catalog_file: Path
    image_dir: Path
    backups: int
    recover_from_backup: bool
    duplicate_ids: DuplicatePolicy
    page_size: int
    catalog_secret: str
    allowed_origins: tuple[str, ...]
    force_tls: bool
    api_host: str
    api_port: int
    max_upload_mb: int
    log_level: str

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or (
        "http://localhost",
        "http://127.0.0.1",
    )


def _resolve(base_dir: Path, raw: str) -> Path:
    path = Path(raw).expanduser()
    return path if path.is_absolute() else base_dir / path


def _int(env_map: Mapping[str, str], name: str, default: int) -> int:
    raw = env_map.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_catalog_config(base_dir: Path, env: Mapping[str, str] | None = None) -> CatalogConfig:
    """Load catalog configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(os.environ if env is None else env)

    raw_policy = env_map.get("CATALOG_DUPLICATE_IDS", DuplicatePolicy.ALLOW.value).strip().lower()
    try:
        duplicate_ids = DuplicatePolicy(raw_policy)
    except ValueError as exc:
        raise ValueError(f"CATALOG_DUPLICATE_IDS must be 'allow' or 'reject', got {raw_policy!r}") from exc

    page_size = _int(env_map, "CATALOG_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    if page_size < 1:
        raise ValueError("CATALOG_PAGE_SIZE must be at least 1")

    return CatalogConfig(
        base_dir=base_dir,
        catalog_file=_resolve(base_dir, env_map.get("CATALOG_FILE", "products.json")),
        image_dir=_resolve(base_dir, env_map.get("IMAGE_DIR", "public/images")),
        backups=max(0, _int(env_map, "CATALOG_BACKUPS", 2)),
        recover_from_backup=env_bool(env_map.get("CATALOG_RECOVER_FROM_BACKUP"), False),
        duplicate_ids=duplicate_ids,
        page_size=page_size,
        catalog_secret=env_map.get("CATALOG_SECRET", "").strip(),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", "")),
        force_tls=env_bool(env_map.get("FORCE_TLS"), False),
        api_host=env_map.get("API_HOST", "0.0.0.0"),
        api_port=_int(env_map, "API_PORT", 5000),
        max_upload_mb=_int(env_map, "MAX_UPLOAD_MB", 5),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )
