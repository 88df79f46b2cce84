#!/usr/bin/env python3
"""
Add a category to the content document.

Usage:
  python scripts/add_category.py "Travel"
"""
from __future__ import annotations

import argparse
import sys

from blog.core.config import get_settings
from blog.repositories.json_storage import DocumentStore
from blog.services.content_service import ContentService


def main() -> None:
    ap = argparse.ArgumentParser(description="Add a category to the content document")
    ap.add_argument("name", help="Category name (2-50 characters)")
    ap.add_argument("--data-file", help="JSON document (default: DATA_FILE or categories.json)")
    args = ap.parse_args()

    settings = get_settings()
    store = DocumentStore(args.data_file or settings.data_file, lock_timeout=settings.storage_lock_timeout)
    store.ensure_initialized()
    name = ContentService(store).add_category(args.name)
    print(f"OK: category '{name}' added")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
