#!/usr/bin/env python3
"""
Print categories with their topic counts, and the topics newest first.

Usage:
  python scripts/list_content.py [--data-file categories.json]
"""
from __future__ import annotations

import argparse
import sys

from blog.core.config import get_settings
from blog.domain.integrity import count_topics_in_category
from blog.repositories.json_storage import DocumentStore


def main() -> None:
    ap = argparse.ArgumentParser(description="List categories and topics")
    ap.add_argument("--data-file", help="JSON document (default: DATA_FILE or categories.json)")
    args = ap.parse_args()

    settings = get_settings()
    doc = DocumentStore(args.data_file or settings.data_file).load()
    print("Categories:")
    for name in doc["categories"]:
        print(f"  {name} ({count_topics_in_category(doc, name)})")
    topics = sorted(doc["topics"], key=lambda t: t.get("createdAt", ""), reverse=True)
    print(f"Topics ({len(topics)}):")
    for topic in topics:
        print(f"  [{topic.get('id')}] {topic.get('title')} <{topic.get('category')}> /topic/{topic.get('slug')}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
