from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from blog.domain import rules
from blog.schemas import CategoryIn, TopicIn
from blog.services.content_service import (
    BlockedError,
    ContentError,
    ContentService,
    DuplicateCategoryError,
    InvalidNameError,
    NotFoundError,
    TopicValidationError,
    UnknownCategoryError,
)

router = APIRouter(prefix="/api", tags=["content"])


def _get_content_service(request: Request) -> ContentService:
    svc = getattr(getattr(request.app, "state", None), "content_service", None)
    if not svc:
        raise RuntimeError("ContentService not configured")
    return svc


def _error(status_code: int, exc: ContentError, **extra) -> JSONResponse:
    return JSONResponse({"error": str(exc), **extra}, status_code=status_code)


@router.get("/data")
def get_data(request: Request):
    return _get_content_service(request).list_all()


@router.get("/rules")
def get_rules():
    return rules.as_dict()


@router.post("/categories")
def add_category(payload: CategoryIn, request: Request):
    svc = _get_content_service(request)
    try:
        svc.add_category(payload.name)
    except (InvalidNameError, DuplicateCategoryError) as exc:
        return _error(400, exc)
    return {"success": True, "message": "Category added successfully"}


# Category names may contain "/".
@router.delete("/categories/{name:path}")
def delete_category(name: str, request: Request):
    svc = _get_content_service(request)
    try:
        deleted = svc.delete_category(name)
    except NotFoundError as exc:
        return _error(404, exc)
    except BlockedError as exc:
        return _error(400, exc, count=exc.count)
    return {
        "success": True,
        "message": f'Category "{deleted}" deleted successfully',
        "deletedCategory": deleted,
    }


@router.post("/topics")
def add_topic(payload: TopicIn, request: Request):
    svc = _get_content_service(request)
    try:
        topic = svc.add_topic(payload.title, payload.content, payload.category)
    except TopicValidationError as exc:
        return _error(400, exc, errors=exc.errors)
    except UnknownCategoryError as exc:
        return _error(400, exc)
    return {"success": True, "message": "Topic added successfully", "topic": topic}


@router.get("/topics/{id_or_slug}")
def get_topic(id_or_slug: str, request: Request):
    try:
        return _get_content_service(request).get_topic(id_or_slug)
    except NotFoundError as exc:
        return _error(404, exc)


@router.delete("/topics/{topic_id}")
def delete_topic(topic_id: str, request: Request):
    svc = _get_content_service(request)
    try:
        deleted = svc.delete_topic(topic_id)
    except NotFoundError as exc:
        return _error(404, exc)
    return {
        "success": True,
        "message": f'Topic "{deleted.get("title", topic_id)}" deleted successfully',
        "deletedTopic": deleted,
    }
