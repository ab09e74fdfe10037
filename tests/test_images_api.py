import io
from dataclasses import replace

import pytest
from PIL import Image

from dailyfeed_image.api.dependencies import get_settings
from dailyfeed_image.api.main import app


def _files(png_bytes, content_type="image/png", name="photo.png"):
    return {"image": (name, png_bytes, content_type)}


@pytest.mark.parametrize("path", ["/api/images/upload", "/api/images/upload/profile"])
def test_upload_returns_success_envelope(client, upload_root, png_bytes, path):
    r = client.post(path, files=_files(png_bytes))
    assert r.status_code == 200, r.text

    body = r.json()
    assert body["result"] == "SUCCESS"
    assert body["status"] == 200
    assert (upload_root / f"{body['data']}.PNG").exists()
    assert (upload_root / f"{body['data']}-thumbnail.PNG").exists()


def test_upload_without_image_field(client):
    r = client.post("/api/images/upload", data={"other": "x"})
    assert r.status_code == 400, r.text

    body = r.json()
    assert body["result"] == "FAIL"
    assert body["status"] == 400
    assert body["reason"] == "Image file is required"
    assert body["path"] == "/api/images/upload"
    assert "timestamp" in body


def test_upload_unsupported_content_type(client):
    r = client.post("/api/images/upload", files=_files(b"hello", content_type="text/plain", name="a.txt"))
    assert r.status_code == 415
    assert r.json()["result"] == "FAIL"


def test_upload_fake_image_is_rejected(client, upload_root):
    r = client.post("/api/images/upload/profile", files=_files(b"not really a png at all"))
    assert r.status_code == 400
    assert r.json()["reason"] == "File content is not a supported image"
    assert not any(upload_root.glob("*.PNG"))


def test_view_original_and_thumbnail(client, png_bytes):
    image_id = client.post("/api/images/upload", files=_files(png_bytes)).json()["data"]

    r = client.get(f"/api/images/view/{image_id}")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    assert r.headers["content-disposition"] == f'inline; filename="{image_id}"'
    assert r.content.startswith(b"\x89PNG")

    thumb = client.get(f"/api/images/view/{image_id}", params={"thumbnail": "true"})
    assert thumb.status_code == 200
    with Image.open(io.BytesIO(thumb.content)) as img:
        assert img.size == (150, 150)


def test_view_missing_image_returns_error_envelope(client):
    r = client.get("/api/images/view/does-not-exist")
    assert r.status_code == 404

    body = r.json()
    assert body["result"] == "FAIL"
    assert body["reason"] == "Image not found"
    assert body["path"] == "/api/images/view/does-not-exist"


def test_view_rejects_traversal(client):
    r = client.get("/api/images/view/..%5Csecret")
    assert r.status_code == 404


def test_bulk_delete(client, png_bytes):
    image_id = client.post("/api/images/upload", files=_files(png_bytes)).json()["data"]

    r = client.post(
        "/api/images/view/command/delete/in",
        json={"imageUrls": [f"http://localhost:8889/api/images/view/{image_id}"]},
    )
    assert r.status_code == 200
    assert r.json() == {"result": "SUCCESS", "status": 200, "data": True}

    assert client.get(f"/api/images/view/{image_id}").status_code == 404


def test_bulk_delete_tolerates_missing_urls(client):
    r = client.post("/api/images/view/command/delete/in", json={})
    assert r.status_code == 200
    assert r.json()["data"] is True


def test_request_id_is_echoed(client):
    r = client.get("/api/images/view/nope", headers={"X-Request-Id": "rid-123"})
    assert r.headers["X-Request-Id"] == "rid-123"
    assert r.json()["request_id"] == "rid-123"


def test_upload_over_size_limit_is_rejected(client, settings, upload_root, png_bytes):
    app.dependency_overrides[get_settings] = lambda: replace(settings, max_file_size=len(png_bytes) - 1)

    r = client.post("/api/images/upload", files=_files(png_bytes))

    assert r.status_code == 413
    body = r.json()
    assert body["result"] == "FAIL"
    assert body["reason"] == "Image file exceeds the maximum allowed size"
    assert not any(upload_root.glob("*.PNG"))


@pytest.mark.parametrize(
    "suffix,content_type",
    [(".gif", "image/gif"), (".webp", "image/webp"), (".png", "image/png"), (".jpg", "image/png")],
)
def test_view_content_type_follows_id_suffix(client, png_bytes, suffix, content_type):
    image_id = client.post("/api/images/upload", files=_files(png_bytes)).json()["data"]

    r = client.get(f"/api/images/view/{image_id}{suffix}")

    assert r.status_code == 200
    assert r.headers["content-type"] == content_type
    assert r.headers["content-disposition"] == f'inline; filename="{image_id}{suffix}"'


def test_bulk_delete_malformed_body_uses_error_envelope(client):
    r = client.post(
        "/api/images/view/command/delete/in",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422

    body = r.json()
    assert body["result"] == "FAIL"
    assert body["status"] == 422
    assert body["reason"] == "Invalid request"
    assert body["path"] == "/api/images/view/command/delete/in"
    assert "detail" not in body


def test_bulk_delete_wrong_type_uses_error_envelope(client):
    r = client.post("/api/images/view/command/delete/in", json={"imageUrls": "not-a-list"})
    assert r.status_code == 422
    assert r.json()["result"] == "FAIL"


def test_upload_with_unwritable_root_reports_processing_failure(client, settings, png_bytes, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    app.dependency_overrides[get_settings] = lambda: replace(settings, upload_root=str(blocker / "sub"))

    r = client.post("/api/images/upload", files=_files(png_bytes))

    assert r.status_code == 500
    assert r.json()["reason"] == "Failed to process image"
