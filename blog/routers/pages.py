"""
HTML pages.

The home, categories and admin pages (and the /posts, /static assets mounted
in blog.app) are the browser client, deployed separately into WEB_DIR; this
repository does not ship them and the routes answer 404 until they exist.
Topic pages are rendered here from blog/templates.
"""
from __future__ import annotations

import os
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse

from blog.services.content_service import ContentService, NotFoundError

router = APIRouter(prefix="", tags=["pages"])

# Route -> file relative to the web directory.
STATIC_PAGES = {
    "/": "index.html",
    "/categories": os.path.join("posts", "categories.html"),
    "/admin": os.path.join("posts", "admin.html"),
}


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _static_page(request: Request, name: str):
    web_dir = request.app.state.settings.web_dir
    path = os.path.join(web_dir, STATIC_PAGES[name])
    if not os.path.exists(path):
        return PlainTextResponse("Page not found", status_code=404)
    return FileResponse(path, media_type="text/html")


def _display_date(value: str) -> str:
    try:
        parsed = datetime.fromisoformat((value or "").replace("Z", "+00:00"))
    except ValueError:
        return value or ""
    return parsed.strftime("%B %d, %Y").replace(" 0", " ")


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return _static_page(request, "/")


@router.get("/categories", response_class=HTMLResponse)
def categories(request: Request):
    return _static_page(request, "/categories")


@router.get("/admin", response_class=HTMLResponse)
def admin(request: Request):
    return _static_page(request, "/admin")


@router.get("/topic/{id_or_slug}", response_class=HTMLResponse)
def topic_page(id_or_slug: str, request: Request):
    svc: ContentService = request.app.state.content_service
    templates = _templates(request)
    try:
        topic = svc.get_topic(id_or_slug)
    except NotFoundError:
        return templates.TemplateResponse(
            request, "topic_not_found.html", {}, status_code=404
        )
    return templates.TemplateResponse(
        request,
        "topic.html",
        {"topic": topic, "created": _display_date(topic.get("createdAt", ""))},
    )
