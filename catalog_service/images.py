"""Storage for uploaded product images."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

IMAGE_URL_PREFIX = "/images"


def save_image(upload: FileStorage | None, image_dir: Path) -> str:
    """Write ``upload`` under ``image_dir`` and return its public path.

    Returns an empty string when no file was sent.
    """

    if upload is None or not upload.filename:
        return ""
    suffix = Path(secure_filename(upload.filename)).suffix.lower()
    filename = f"{uuid4().hex}{suffix}"
    image_dir = Path(image_dir)
    image_dir.mkdir(parents=True, exist_ok=True)
    upload.save(image_dir / filename)
    return f"{IMAGE_URL_PREFIX}/{filename}"
