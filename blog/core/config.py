"""
Configuration helpers for the blog backend.

Settings are read once from the environment; tests call
``get_settings.cache_clear()`` after changing env vars.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_file: str
    uploads_dir: str
    web_dir: str
    max_upload_bytes: int
    storage_lock_timeout: float
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    web_dir = os.getenv("WEB_DIR", "public")
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_file=os.getenv("DATA_FILE", "categories.json"),
        uploads_dir=os.getenv("UPLOADS_DIR", os.path.join(web_dir, "uploads")),
        web_dir=web_dir,
        max_upload_bytes=max(1, _int(os.getenv("MAX_UPLOAD_BYTES", ""), DEFAULT_MAX_UPLOAD_BYTES)),
        storage_lock_timeout=_float(os.getenv("STORAGE_LOCK_TIMEOUT", "10"), 10.0),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
