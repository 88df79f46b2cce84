"""Category and topic use cases over the JSON document."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

from blog.domain import integrity, rules
from blog.domain.slugs import slugify
from blog.repositories.json_storage import DocumentStore

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ContentError(Exception):
    """Base exception for content workflows."""


class InvalidNameError(ContentError):
    """Raised when a category name fails the length rules."""


class DuplicateCategoryError(ContentError):
    """Raised when the category already exists."""


class NotFoundError(ContentError):
    """Raised when a category or topic does not exist."""


class BlockedError(ContentError):
    """Raised when a category is still referenced by topics."""

    def __init__(self, message: str, count: int) -> None:
        super().__init__(message)
        self.count = count


class TopicValidationError(ContentError):
    """Raised when topic fields fail the validation rules."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class UnknownCategoryError(ContentError):
    """Raised when a topic names a category that does not exist."""


def _utc_timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _next_topic_id(topics: list, now_ms: int) -> str:
    """Epoch milliseconds as text, bumped past any existing numeric id."""
    highest = -1
    for topic in topics:
        value = str(topic.get("id", "")) if isinstance(topic, dict) else ""
        if value.isdigit():
            highest = max(highest, int(value))
    return str(max(now_ms, highest + 1))


class ContentService:
    """Implements list/add/delete/get for categories and topics."""

    def __init__(self, store: DocumentStore, clock=None) -> None:
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def list_all(self) -> dict:
        return self.store.load()

    def add_category(self, name: str | None) -> str:
        candidate = (name or "").strip()
        problem = rules.category_name_error(candidate)
        if problem:
            raise InvalidNameError(problem)
        with self.store.transaction() as doc:
            if integrity.is_duplicate_category(doc, candidate):
                raise DuplicateCategoryError("Category already exists")
            doc["categories"].append(candidate)
        logger.info("Added category %r", candidate)
        return candidate

    def delete_category(self, name: str) -> str:
        with self.store.transaction() as doc:
            if not integrity.category_exists(doc, name):
                raise NotFoundError("Category not found")
            blocked = integrity.can_delete_category(doc, name)
            if blocked:
                raise BlockedError(
                    f'Cannot delete category "{name}" because it is used by '
                    f"{blocked.count} topic(s). Delete or move those topics first.",
                    blocked.count,
                )
            doc["categories"].remove(name)
        logger.info("Deleted category %r", name)
        return name

    def add_topic(self, title: str | None, content: str | None, category: str | None) -> dict:
        title = (title or "").strip()
        content = (content or "").strip()
        category = category or ""
        errors = rules.topic_errors(title, content, category)
        if errors:
            raise TopicValidationError(errors)
        with self.store.transaction() as doc:
            if not integrity.can_create_topic(doc, category):
                raise UnknownCategoryError("Selected category does not exist")
            now = self._clock()
            topic = {
                "id": _next_topic_id(doc["topics"], (now - _EPOCH) // timedelta(milliseconds=1)),
                "title": title,
                "content": content,
                "category": category,
                "createdAt": _utc_timestamp(now),
                "slug": slugify(title),
            }
            doc["topics"].append(topic)
        logger.info("Added topic %s (%r) in %r", topic["id"], title, category)
        return topic

    def delete_topic(self, topic_id: str) -> dict:
        with self.store.transaction() as doc:
            topics = doc["topics"]
            for idx, topic in enumerate(topics):
                if isinstance(topic, dict) and topic.get("id") == topic_id:
                    removed = topics.pop(idx)
                    break
            else:
                raise NotFoundError("Topic not found")
        logger.info("Deleted topic %s", topic_id)
        return removed

    def get_topic(self, id_or_slug: str) -> dict:
        """Match by id first; otherwise the first topic whose slug matches."""
        topics = [t for t in self.store.load()["topics"] if isinstance(t, dict)]
        for topic in topics:
            if topic.get("id") == id_or_slug:
                return topic
        for topic in topics:
            if topic.get("slug") == id_or_slug:
                return topic
        raise NotFoundError("Topic not found")
