"""
FastAPI routers grouped by domain (content API, uploads, pages).

Each module exposes an APIRouter included by app.create_app(). Services are
looked up on request.app.state so tests can build isolated apps.
"""
