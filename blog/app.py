from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from blog.core.config import Settings, get_settings
from blog.core.logging import setup_logging
from blog.repositories.json_storage import DocumentStore, StorageCorruptError, StorageError
from blog.routers import content as content_router
from blog.routers import pages as pages_router
from blog.routers import uploads as uploads_router
from blog.services.content_service import ContentService
from blog.services.image_service import UPLOADS_URL_PREFIX, ImageStore

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def _storage_error_handler(request: Request, exc: StorageError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    message = "Content data is corrupted" if isinstance(exc, StorageCorruptError) else "Failed to access storage"
    return JSONResponse({"error": message}, status_code=500)


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    fields = sorted({".".join(str(part) for part in err.get("loc", ())[1:]) or "body" for err in exc.errors()})
    logger.info("Rejected malformed body on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": f"Invalid value for: {', '.join(fields)}"}, status_code=400)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn --factory blog.app:create_app``)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    store = DocumentStore(settings.data_file, lock_timeout=settings.storage_lock_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_initialized()
        os.makedirs(settings.uploads_dir, exist_ok=True)
        logger.info("Serving content from %s, uploads in %s", store.path, settings.uploads_dir)
        yield

    app = FastAPI(title="Blog Content API", lifespan=lifespan)
    app.state.settings = settings
    app.state.document_store = store
    app.state.content_service = ContentService(store)
    app.state.image_store = ImageStore(settings.uploads_dir, max_bytes=settings.max_upload_bytes)
    app.state.templates = Jinja2Templates(directory=os.path.join(BASE, "templates"))

    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(StorageError, _storage_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(content_router.router)
    app.include_router(uploads_router.router)
    app.include_router(pages_router.router)

    # WEB_DIR holds the separately deployed browser client.
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=settings.uploads_dir, check_dir=False), name="uploads")
    app.mount("/posts", StaticFiles(directory=os.path.join(settings.web_dir, "posts"), check_dir=False), name="posts")
    app.mount("/static", StaticFiles(directory=settings.web_dir, check_dir=False), name="static")
    return app


app = create_app()
