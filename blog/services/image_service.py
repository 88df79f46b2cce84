"""Image upload validation and storage for the rich-text editor."""

from __future__ import annotations

from pathlib import Path
import logging
import mimetypes
import os
import re
import secrets
import tempfile
import time

from blog.core.config import DEFAULT_MAX_UPLOAD_BYTES
from blog.repositories.json_storage import StorageUnavailable

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"

_SAFE_SUFFIX = re.compile(r"\.[a-z0-9]{1,10}")


class UploadError(Exception):
    """Base exception for rejected uploads."""


class NotAnImageError(UploadError):
    """Raised when the declared mime type is not image/*."""


class TooLargeError(UploadError):
    """Raised when the upload exceeds the configured ceiling."""


class EmptyUploadError(UploadError):
    """Raised when the upload has no bytes."""


def _extension(original_filename: str | None, mime_type: str) -> str:
    suffix = Path(original_filename or "").suffix.lower()
    if _SAFE_SUFFIX.fullmatch(suffix):
        return suffix
    guessed = mimetypes.guess_extension(mime_type.split(";", 1)[0].strip())
    return guessed or ""


def generate_filename(extension: str) -> str:
    """img-<epoch millis>-<9 random digits><extension>"""
    millis = time.time_ns() // 1_000_000
    return f"img-{millis}-{secrets.randbelow(10**9):09d}{extension}"


class ImageStore:
    """Writes accepted images into a flat public directory."""

    def __init__(self, uploads_dir: str | os.PathLike, *, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
        self.uploads_dir = Path(uploads_dir)
        self.max_bytes = max_bytes

    def store(self, data: bytes, declared_mime_type: str | None, original_filename: str | None) -> str:
        """Validate and persist `data`; returns the root-relative URL of the file."""
        mime_type = (declared_mime_type or "").strip().lower()
        if not mime_type.startswith("image/"):
            raise NotAnImageError("Only image files are allowed")
        if not data:
            raise EmptyUploadError("Image is empty")
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise TooLargeError(f"Image exceeds the {limit_mb:g}MB limit")

        filename = generate_filename(_extension(original_filename, mime_type))
        tmp_name = None
        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".upload-", dir=self.uploads_dir)
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, self.uploads_dir / filename)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailable(f"Cannot write upload {filename} to {self.uploads_dir}: {exc}") from exc
        logger.info("Stored upload %r as %s (%d bytes)", original_filename, filename, len(data))
        return f"{UPLOADS_URL_PREFIX}/{filename}"
