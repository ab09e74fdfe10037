import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from dailyfeed_image.api.dependencies import get_settings
from dailyfeed_image.api.main import app
from dailyfeed_image.core.config import ImageSettings
from dailyfeed_image.core.images import FileService, ProfileImageStorageService


def make_image_bytes(fmt: str = "PNG", size=(800, 600), mode: str = "RGB", color=(200, 40, 40)) -> bytes:
    if mode in ("L", "P"):
        color = 128
    elif mode == "CMYK":
        color = (0, 120, 200, 0)
    elif mode == "RGBA" and len(color) == 3:
        color = (*color, 128)
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def upload_root(tmp_path: Path) -> Path:
    return tmp_path / "store" / "images"


@pytest.fixture()
def settings(upload_root: Path) -> ImageSettings:
    return ImageSettings(upload_root=str(upload_root))


@pytest.fixture()
def file_service(settings: ImageSettings) -> FileService:
    return FileService(settings)


@pytest.fixture()
def storage(settings: ImageSettings, file_service: FileService) -> ProfileImageStorageService:
    return ProfileImageStorageService(settings, file_service)


@pytest.fixture()
def client(settings: ImageSettings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_settings, None)


@pytest.fixture()
def png_bytes() -> bytes:
    return make_image_bytes("PNG", (1000, 500))


@pytest.fixture()
def image_bytes():
    return make_image_bytes
