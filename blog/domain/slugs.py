"""Domain helpers for topic slugs."""
from __future__ import annotations

import re

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def slugify(title: str | None) -> str:
    """
    Derive a URL-safe slug from a title.

    "Hello, World!" -> "hello-world". Titles without any [a-z0-9] character
    produce an empty string; callers must accept that.
    """
    slug = _NON_SLUG_RUN.sub("-", (title or "").lower())
    return slug.strip("-")
