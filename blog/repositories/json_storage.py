"""
JSON document persistence.

The whole content store lives in one JSON file shaped as
``{"categories": [...], "topics": [...]}``. Every operation reads the file
fresh; every mutation rewrites it completely through ``transaction()``, which
holds a per-path lock so writers in this process never lose each other's
updates. Writers in *other* processes are not coordinated.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import json
import logging
import os
import tempfile
import threading

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ("General", "Technology", "Lifestyle")

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


class StorageError(Exception):
    """Base exception for document persistence."""


class StorageCorruptError(StorageError):
    """Raised when the document is not well-formed JSON of the expected shape."""


class StorageUnavailable(StorageError):
    """Raised when the document cannot be read, written or locked in time."""


def seed_document() -> dict:
    return {"categories": list(DEFAULT_CATEGORIES), "topics": []}


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _locks[key] = lock
        return lock


class DocumentStore:
    """Owns the JSON document at `path` and serializes writes to it."""

    def __init__(self, path: str | os.PathLike, *, lock_timeout: float = 10.0) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._lock = _lock_for(self.path)

    def ensure_initialized(self) -> bool:
        """Write the seed document if the file is missing. Returns True when created."""
        with self._locked():
            if self.path.exists():
                return False
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(seed_document())
        logger.info("Created content document at %s", self.path)
        return True

    def load(self) -> dict:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailable(f"Cannot read {self.path}: {exc}") from exc
        try:
            doc = json.loads(raw)
        except ValueError as exc:
            raise StorageCorruptError(f"{self.path} is not valid JSON: {exc}") from exc
        if not isinstance(doc, dict):
            raise StorageCorruptError(f"{self.path} must hold a JSON object")
        for key in ("categories", "topics"):
            if not isinstance(doc.get(key), list):
                raise StorageCorruptError(f"{self.path} is missing the '{key}' list")
        return doc

    def save(self, doc: dict) -> None:
        with self._locked():
            self._write(doc)

    @contextmanager
    def transaction(self) -> Iterator[dict]:
        """
        Load the document under the write lock, yield it for in-place mutation
        and save it when the block exits normally. An exception inside the
        block discards the changes.
        """
        with self._locked():
            doc = self.load()
            yield doc
            self._write(doc)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise StorageUnavailable(
                f"Timed out after {self.lock_timeout}s waiting for the lock on {self.path}"
            )
        try:
            yield
        finally:
            self._lock.release()

    def _write(self, doc: dict) -> None:
        payload = json.dumps(doc, ensure_ascii=False, indent=2)
        directory = self.path.parent
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailable(f"Cannot write {self.path}: {exc}") from exc
