"""
Profile image storage on the local filesystem.

Layout under ``upload_root``:
    <image_id>.PNG            original, bounded by max width/height
    <image_id>-thumbnail.PNG  square center crop of ``thumbnail_size``
"""
from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from dailyfeed_image.core.config import ImageSettings
from dailyfeed_image.core.observability.metrics import (
    IMAGE_PROCESSING_SECONDS,
    IMAGES_DELETED_TOTAL,
    IMAGES_STORED_TOTAL,
    inc_rejected,
)

from .errors import ImageException, ImageProcessingFailException
from .file_service import FileService
from .models import ImageDeleteBulkRequest, ImageExtensionType, UploadedImage

log = logging.getLogger("dailyfeed.images")

THUMBNAIL_SUFFIX = "-thumbnail"
STORED_EXTENSION = ImageExtensionType.PNG


def _is_unsafe_id(image_id: str) -> bool:
    return ".." in image_id or "/" in image_id or "\\" in image_id


def extract_view_id(image_url: Optional[str]) -> Optional[str]:
    """
    Pull the image id out of a view URL.

    ``https://host/api/images/view/abc.png?thumbnail=true`` -> ``abc``
    """
    if image_url is None or not image_url.strip():
        return None

    # trailing slashes do not make an empty segment
    stripped = image_url.strip().rstrip("/")
    if not stripped:
        return None
    last_part = stripped.split("/")[-1]

    query_index = last_part.find("?")
    if query_index > 0:
        last_part = last_part[:query_index]

    extension_index = last_part.rfind(".")
    if extension_index > 0:
        return last_part[:extension_index]
    return last_part


class ProfileImageStorageService:
    def __init__(self, settings: ImageSettings, file_service: Optional[FileService] = None):
        self.settings = settings
        self.file_service = file_service or FileService(settings)

    @property
    def image_root(self) -> Path:
        return Path(self.settings.upload_root)

    def store(self, upload: Optional[UploadedImage]) -> str:
        with IMAGE_PROCESSING_SECONDS.time():
            try:
                self.file_service.validate_file(upload)
            except ImageException as e:
                inc_rejected(e.code.name)
                log.warning("Rejected upload %s: %s", getattr(upload, "filename", None), e)
                raise

            image_id = str(uuid.uuid4())

            original_file: Optional[Path] = None
            thumbnail_file: Optional[Path] = None
            try:
                image_dir = self.file_service.create_directories(self.image_root)
                original_file = self.file_service.resolve_path(image_dir, image_id, STORED_EXTENSION)
                thumbnail_file = self.file_service.resolve_path(
                    image_dir, image_id + THUMBNAIL_SUFFIX, STORED_EXTENSION
                )

                self.file_service.create_original(
                    upload,
                    original_file,
                    STORED_EXTENSION,
                    self.settings.max_width,
                    self.settings.max_height,
                    self.settings.quality,
                )
                self.file_service.create_thumbnail(
                    original_file,
                    thumbnail_file,
                    STORED_EXTENSION,
                    self.settings.thumbnail_size,
                    self.settings.thumbnail_size,
                    self.settings.quality,
                )
            except ImageException as e:
                self.file_service.clean_up(original_file, thumbnail_file)
                inc_rejected(e.code.name)
                log.warning("Failed to store image: %s", e)
                raise
            except Exception as e:
                self.file_service.clean_up(original_file, thumbnail_file)
                inc_rejected("unexpected")
                log.error("Failed to store image: %s", e, exc_info=True)
                raise ImageProcessingFailException(f"Failed to store image: {e}") from e

        IMAGES_STORED_TOTAL.inc()
        log.info("Stored image %s (%s)", image_id, upload.filename)
        return image_id

    def get(self, image_id: Optional[str], thumbnail: bool = False) -> Optional[Path]:
        if image_id is None or not image_id.strip():
            log.warning("Invalid image ID provided")
            return None

        if _is_unsafe_id(image_id):
            log.warning("Invalid image ID format: %s", image_id)
            return None

        # accept ids copied from view URLs, e.g. "<id>.png"
        if ImageExtensionType.from_file_name(image_id) is not None:
            image_id = image_id.rsplit(".", 1)[0]

        suffix = THUMBNAIL_SUFFIX if thumbnail else ""
        file_path = self.file_service.resolve_path(self.image_root, image_id + suffix, STORED_EXTENSION)

        normalized = self.file_service.normalize_path(file_path)
        root = self.file_service.normalize_path(self.image_root)
        if root not in normalized.parents:
            log.warning("Path traversal attempt detected: %s", image_id)
            return None

        if not normalized.is_file() or not os.access(normalized, os.R_OK):
            log.debug("Image not found or not readable: %s", normalized)
            return None
        return normalized

    def delete_images(self, request: Optional[ImageDeleteBulkRequest]) -> int:
        """Remove originals and thumbnails for each URL; returns how many ids were processed."""
        if request is None or request.image_urls is None:
            return 0

        deleted = 0
        for image_url in request.image_urls:
            try:
                view_id = extract_view_id(image_url)
                if view_id is None or not view_id.strip():
                    log.warning("Invalid viewId extracted from URL: %s", image_url)
                    continue

                if _is_unsafe_id(view_id):
                    log.warning("Invalid viewId format: %s", view_id)
                    continue

                original_path = self.file_service.resolve_path(self.image_root, view_id, STORED_EXTENSION)
                thumbnail_path = self.file_service.resolve_path(
                    self.image_root, view_id + THUMBNAIL_SUFFIX, STORED_EXTENSION
                )
                self.file_service.clean_up(original_path, thumbnail_path)

                deleted += 1
                IMAGES_DELETED_TOTAL.inc()
                log.info("Deleted images for viewId: %s", view_id)
            except Exception:
                log.error("Failed to delete image from URL: %s", image_url, exc_info=True)
        return deleted
