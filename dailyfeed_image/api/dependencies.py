from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from dailyfeed_image.core.config import ImageSettings, load_settings
from dailyfeed_image.core.images import FileService, ProfileImageStorageService


@lru_cache(maxsize=1)
def get_settings() -> ImageSettings:
    return load_settings()


def get_storage_service(settings: ImageSettings = Depends(get_settings)) -> ProfileImageStorageService:
    return ProfileImageStorageService(settings, FileService(settings))
