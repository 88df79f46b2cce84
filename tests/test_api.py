"""HTTP surface exercised through FastAPI's TestClient."""
from __future__ import annotations

import re
import sys
from dataclasses import replace
from pathlib import Path
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blog.app import create_app  # noqa: E402
from blog.core import config as core_config  # noqa: E402
from blog.services.image_service import ImageStore  # noqa: E402

CONTENT = "<p>Some meaningful body text.</p>"


@pytest.fixture()
def settings(tmp_path, monkeypatch):
    web = tmp_path / "public"
    monkeypatch.setenv("WEB_DIR", str(web))
    monkeypatch.setenv("DATA_FILE", str(tmp_path / "categories.json"))
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "2048")
    core_config.get_settings.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def _create_topic(client, title="My first topic", category="General"):
    resp = client.post("/api/topics", json={"title": title, "content": CONTENT, "category": category})
    assert resp.status_code == 200, resp.text
    return resp.json()["topic"]


def test_startup_seeds_document(client, settings):
    assert Path(settings.data_file).exists()
    assert Path(settings.uploads_dir).is_dir()
    data = client.get("/api/data").json()
    assert data == {"categories": ["General", "Technology", "Lifestyle"], "topics": []}


def test_category_lifecycle(client):
    resp = client.post("/api/categories", json={"name": "Science & Tech"})
    assert resp.json() == {"success": True, "message": "Category added successfully"}

    dup = client.post("/api/categories", json={"name": " Science & Tech "})
    assert dup.status_code == 400
    assert dup.json()["error"] == "Category already exists"

    resp = client.delete(f"/api/categories/{quote('Science & Tech')}")
    assert resp.status_code == 200
    assert resp.json()["deletedCategory"] == "Science & Tech"

    missing = client.delete("/api/categories/Nope")
    assert missing.status_code == 404


def test_missing_category_name_is_400(client):
    resp = client.post("/api/categories", json={})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Category name is required"


def test_delete_category_in_use_reports_count(client):
    _create_topic(client, "One topic", "Technology")
    resp = client.delete("/api/categories/Technology")
    assert resp.status_code == 400
    assert resp.json()["count"] == 1
    assert "Technology" in client.get("/api/data").json()["categories"]


def test_topic_lifecycle(client):
    topic = _create_topic(client, "Hello, World!")
    assert topic["slug"] == "hello-world"

    assert client.get(f"/api/topics/{topic['id']}").json() == topic
    assert client.get("/api/topics/hello-world").json() == topic

    resp = client.delete(f"/api/topics/{topic['id']}")
    assert resp.status_code == 200
    assert resp.json()["deletedTopic"] == topic
    assert client.delete(f"/api/topics/{topic['id']}").status_code == 404
    assert client.get("/api/topics/hello-world").status_code == 404


def test_add_topic_validation(client):
    resp = client.post("/api/topics", json={"title": "ab", "content": CONTENT, "category": "General"})
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["Title must be at least 3 characters long"]

    resp = client.post("/api/topics", json={"title": "abc", "content": CONTENT, "category": "Missing"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Selected category does not exist"


def test_upload_image(client):
    files = {"image": ("photo.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 16, "image/png")}
    resp = client.post("/api/upload-image", files=files)
    assert resp.status_code == 200
    url = resp.json()["imageUrl"]
    assert re.fullmatch(r"/uploads/img-\d+-\d+\.png", url)
    served = client.get(url)
    assert served.status_code == 200
    assert served.content.startswith(b"\x89PNG")


def test_upload_rejections(client):
    resp = client.post("/api/upload-image", files={"image": ("a.txt", b"hello", "text/plain")})
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    resp = client.post("/api/upload-image", files={"image": ("big.png", b"x" * 4096, "image/png")})
    assert resp.status_code == 400

    resp = client.post("/api/upload-image", data={"other": "field"})
    assert resp.status_code == 400


def test_rules_endpoint(client):
    assert client.get("/api/rules").json()["categoryName"] == {"min": 2, "max": 50}


def test_topic_page_renders_html(client):
    topic = _create_topic(client, "<Escaped> title")
    page = client.get(f"/topic/{topic['slug']}")
    assert page.status_code == 200
    assert "&lt;Escaped&gt; title" in page.text
    assert CONTENT in page.text

    missing = client.get("/topic/does-not-exist")
    assert missing.status_code == 404
    assert "Topic Not Found" in missing.text


def test_static_pages(client, settings):
    assert client.get("/admin").status_code == 404
    posts = Path(settings.web_dir) / "posts"
    posts.mkdir(parents=True)
    (posts / "admin.html").write_text("<h1>Admin</h1>", encoding="utf-8")
    resp = client.get("/admin")
    assert resp.status_code == 200
    assert "<h1>Admin</h1>" in resp.text


def test_corrupt_document_is_500(client, settings):
    Path(settings.data_file).write_text("{broken", encoding="utf-8")
    resp = client.get("/api/data")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Content data is corrupted"}
    # The next request re-reads the file instead of caching the failure.
    Path(settings.data_file).write_text('{"categories": [], "topics": []}', encoding="utf-8")
    assert client.get("/api/data").status_code == 200


def test_lock_timeout_setting(settings):
    app = create_app(replace(settings, storage_lock_timeout=0.5))
    assert app.state.document_store.lock_timeout == 0.5


def test_category_with_slash_can_be_deleted(client):
    assert client.post("/api/categories", json={"name": "CI/CD"}).status_code == 200
    resp = client.delete(f"/api/categories/{quote('CI/CD', safe='')}")
    assert resp.status_code == 200
    assert resp.json()["deletedCategory"] == "CI/CD"
    assert "CI/CD" not in client.get("/api/data").json()["categories"]

    missing = client.delete("/api/categories/CI%2FCD")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Category not found"}


def test_wrongly_typed_body_is_400(client):
    resp = client.post("/api/categories", json={"name": 123})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid value for: name"}

    resp = client.post("/api/topics", json={"title": ["x"], "content": CONTENT, "category": "General"})
    assert resp.status_code == 400
    assert "title" in resp.json()["error"]
    assert client.get("/api/data").json()["topics"] == []


def test_upload_write_failure_is_500(client, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    client.app.state.image_store = ImageStore(blocker, max_bytes=2048)
    files = {"image": ("photo.png", b"\x89PNG\r\n\x1a\n", "image/png")}
    resp = client.post("/api/upload-image", files=files)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to access storage"}
