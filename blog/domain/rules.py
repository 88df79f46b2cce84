"""
Validation rules for categories and topics.

These limits are the only copy of the rules: the service enforces them and
the /api/rules endpoint publishes them to the browser client.
"""
from __future__ import annotations

import re

CATEGORY_NAME_MIN = 2
CATEGORY_NAME_MAX = 50
TITLE_MIN = 3
TITLE_MAX = 200
CONTENT_TEXT_MIN = 10
CONTENT_MAX_BYTES = 500_000

_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_tags(html_text: str | None) -> str:
    return _TAG_PATTERN.sub("", html_text or "")


def category_name_error(name: str) -> str | None:
    """Return a human readable problem with an already trimmed name, or None."""
    if not name:
        return "Category name is required"
    if len(name) < CATEGORY_NAME_MIN:
        return f"Category name must be at least {CATEGORY_NAME_MIN} characters long"
    if len(name) > CATEGORY_NAME_MAX:
        return f"Category name must be no more than {CATEGORY_NAME_MAX} characters long"
    return None


def topic_errors(title: str, content: str, category: str) -> list[str]:
    """Check trimmed topic fields; returns every failed rule in field order."""
    errors: list[str] = []
    if not title:
        errors.append("Title is required")
    elif len(title) < TITLE_MIN:
        errors.append(f"Title must be at least {TITLE_MIN} characters long")
    elif len(title) > TITLE_MAX:
        errors.append(f"Title must be no more than {TITLE_MAX} characters long")

    if not content:
        errors.append("Content is required")
    else:
        if len(strip_tags(content)) < CONTENT_TEXT_MIN:
            errors.append(f"Content must be at least {CONTENT_TEXT_MIN} characters long")
        if len(content.encode("utf-8")) > CONTENT_MAX_BYTES:
            errors.append("Content is too large. Please reduce text content.")

    if not category:
        errors.append("Category is required")
    return errors


def as_dict() -> dict:
    return {
        "categoryName": {"min": CATEGORY_NAME_MIN, "max": CATEGORY_NAME_MAX},
        "title": {"min": TITLE_MIN, "max": TITLE_MAX},
        "content": {"minText": CONTENT_TEXT_MIN, "maxBytes": CONTENT_MAX_BYTES},
    }
