"""Referential integrity rules between topics and categories."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Blocked:
    """Deletion refused because `count` topics still use the category."""

    count: int


def _categories(doc: Mapping[str, Any]) -> list:
    categories = doc.get("categories")
    return categories if isinstance(categories, list) else []


def _topics(doc: Mapping[str, Any]) -> list:
    topics = doc.get("topics")
    return topics if isinstance(topics, list) else []


def category_exists(doc: Mapping[str, Any], name: str) -> bool:
    return name in _categories(doc)


def is_duplicate_category(doc: Mapping[str, Any], name: str) -> bool:
    # Exact, case-sensitive match; "news" and "News" are different categories.
    return category_exists(doc, name)


def can_create_topic(doc: Mapping[str, Any], category: str) -> bool:
    return category_exists(doc, category)


def count_topics_in_category(doc: Mapping[str, Any], name: str) -> int:
    return sum(
        1 for topic in _topics(doc) if isinstance(topic, dict) and topic.get("category") == name
    )


def can_delete_category(doc: Mapping[str, Any], name: str) -> Blocked | None:
    """Return Blocked(count) while any topic references `name`, else None."""
    count = count_topics_in_category(doc, name)
    if count:
        return Blocked(count)
    return None
