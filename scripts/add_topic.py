#!/usr/bin/env python3
"""
Publish a topic whose HTML body is read from a file.

Usage:
  python scripts/add_topic.py --title "My first post" --category General --content-file post.html
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from blog.core.config import get_settings
from blog.repositories.json_storage import DocumentStore
from blog.services.content_service import ContentService, TopicValidationError


def main() -> None:
    ap = argparse.ArgumentParser(description="Add a topic to the content document")
    ap.add_argument("--title", required=True, help="Topic title (3-200 characters)")
    ap.add_argument("--category", required=True, help="Existing category name")
    ap.add_argument("--content-file", required=True, help="File holding the HTML content")
    ap.add_argument("--data-file", help="JSON document (default: DATA_FILE or categories.json)")
    args = ap.parse_args()

    content_path = Path(args.content_file)
    if not content_path.exists():
        raise SystemExit(f"File '{content_path}' not found")

    settings = get_settings()
    store = DocumentStore(args.data_file or settings.data_file, lock_timeout=settings.storage_lock_timeout)
    store.ensure_initialized()
    try:
        topic = ContentService(store).add_topic(
            args.title, content_path.read_text(encoding="utf-8"), args.category
        )
    except TopicValidationError as exc:
        raise SystemExit("Invalid topic:\n  " + "\n  ".join(exc.errors))
    print("OK: topic added")
    print(f"  ID: {topic['id']}")
    print(f"  Slug: {topic['slug'] or '(empty)'}")
    print(f"  URL: /topic/{topic['slug'] or topic['id']}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
