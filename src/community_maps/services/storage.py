"""Object storage for uploaded images."""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path

from community_maps.core.errors import StorageError, ValidationError
from community_maps.core.settings import settings

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def validate_image(content_type: str | None, size: int) -> None:
    """Reject unsupported image types and payloads over the size limit."""
    if content_type not in settings.image_accepted_types:
        raise ValidationError("Please upload a JPEG, PNG, or WebP image")
    if size <= 0:
        raise ValidationError("Image is empty")
    if size > settings.image_max_bytes:
        limit_mb = settings.image_max_bytes / (1024 * 1024)
        raise ValidationError(f"Image must be smaller than {limit_mb:g}MB")


def generate_file_name(original_name: str | None, content_type: str) -> str:
    """Return a collision-resistant file name keeping a sensible extension."""
    suffix = Path(original_name or "").suffix.lstrip(".").lower()
    extension = _EXTENSIONS.get(content_type) or suffix or "bin"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{extension}"


class LocalObjectStorage:
    """Filesystem-backed store returning stable public URLs."""

    def __init__(self, root: str | Path | None = None, public_base_url: str | None = None) -> None:
        self.root = Path(root or settings.upload_dir)
        self.public_base_url = (public_base_url or settings.upload_public_base_url).rstrip("/")

    def put(
        self,
        data: bytes,
        *,
        filename: str | None,
        content_type: str,
        folder: str = "maps-display-pictures",
    ) -> str:
        """Store an image and return its public URL."""
        validate_image(content_type, len(data))
        name = generate_file_name(filename, content_type)
        target = self.root / folder / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.error("Failed to store upload %s: %s", target, exc)
            raise StorageError("Failed to upload image") from exc
        return f"{self.public_base_url}/{folder}/{name}"


def get_object_storage() -> LocalObjectStorage:
    """Return the configured object store."""
    return LocalObjectStorage()
