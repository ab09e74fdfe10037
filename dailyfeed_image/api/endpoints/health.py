from __future__ import annotations

import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from dailyfeed_image import __version__
from dailyfeed_image.api.dependencies import get_settings
from dailyfeed_image.core.config import ImageSettings

router = APIRouter(prefix="/actuator", tags=["actuator"])

APP_NAME = "dailyfeed-image"
APP_DESCRIPTION = "Profile image upload, thumbnailing and serving for dailyfeed"


def _storage_problems(settings: ImageSettings) -> list[str]:
    problems: list[str] = []
    root = Path(settings.upload_root)
    try:
        root.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=root, prefix=".ready-", delete=True) as f:
            f.write(b"ok")
    except OSError as e:
        problems.append(f"upload_root_not_writable:{root} err={type(e).__name__}")
    return problems


@router.get("/health")
def health(settings: ImageSettings = Depends(get_settings)):
    return readiness(settings)


@router.get("/health/liveness")
def liveness():
    return {"status": "UP"}


@router.get("/health/readiness")
def readiness(settings: ImageSettings = Depends(get_settings)):
    """Ready when the upload root can be written."""
    problems = _storage_problems(settings)
    if problems:
        return JSONResponse(status_code=503, content={"status": "DOWN", "problems": problems})
    return {"status": "UP"}


@router.get("/info")
def info():
    return {"app": {"name": APP_NAME, "version": __version__, "description": APP_DESCRIPTION}}
