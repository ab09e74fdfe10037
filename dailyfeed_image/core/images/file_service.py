from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from dailyfeed_image.core.config import ImageSettings

from .errors import (
    CorruptedImageException,
    EmptyImageFileException,
    FileTooLargeException,
    FileTooSmallException,
    ImageDimensionExceededException,
    ImageException,
    ImageFileRequiredException,
    ImageProcessingFailException,
    InvalidImageSignatureException,
    UnsupportedImageFormatException,
)
from .models import ImageExtensionType, UploadedImage
from .signature import HEADER_SIZE, detect_image_signature

log = logging.getLogger("dailyfeed.images.file")

SUPPORTED_CONTENT_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/bmp", "image/gif"}
)

# Modes each output format can store without conversion
_SAVE_MODES = {
    "PNG": {"1", "L", "LA", "I", "P", "RGB", "RGBA"},
    "JPEG": {"L", "RGB", "CMYK"},
    "GIF": {"L", "P"},
    "BMP": {"1", "L", "P", "RGB"},
    "WEBP": {"RGB", "RGBA"},
}


def _prepare_for_format(img: Image.Image, fmt: str) -> Image.Image:
    allowed = _SAVE_MODES.get(fmt)
    if allowed is None or img.mode in allowed:
        return img
    if fmt == "GIF":
        return img.convert("P")
    has_alpha = "A" in img.getbands() or img.info.get("transparency") is not None
    if has_alpha and "RGBA" in allowed:
        return img.convert("RGBA")
    return img.convert("RGB")


def _save_params(fmt: str, quality: float) -> dict:
    if fmt in ("JPEG", "WEBP"):
        return {"quality": max(1, min(100, int(round(quality * 100))))}
    if fmt == "PNG":
        return {"optimize": True}
    return {}


class FileService:
    """Validation and Pillow-backed resizing for uploaded images."""

    def __init__(self, settings: ImageSettings):
        self.settings = settings

    def validate_file(self, upload: Optional[UploadedImage]) -> ImageExtensionType:
        if upload is None or upload.is_empty():
            raise ImageFileRequiredException()

        log.debug(
            "Validating file - name=%s size=%d content_type=%s",
            upload.filename,
            upload.size,
            upload.content_type,
        )

        if upload.size > self.settings.max_file_size:
            raise FileTooLargeException(
                f"File size exceeds maximum allowed size: {self.settings.max_file_size} bytes"
            )

        content_type = (upload.content_type or "").strip().lower()
        if not content_type or content_type not in SUPPORTED_CONTENT_TYPES:
            raise UnsupportedImageFormatException(f"Unsupported file format: {upload.content_type}")

        kind = self._validate_signature(upload)
        log.debug("File signature validation passed (%s)", kind.value)
        return kind

    def create_directories(self, image_root: str | Path) -> Path:
        image_dir = Path(image_root)
        image_dir.mkdir(parents=True, exist_ok=True)
        return image_dir

    def resolve_path(self, image_dir: str | Path, file_name: str, extension_type: ImageExtensionType) -> Path:
        return Path(image_dir) / extension_type.with_file_name(file_name)

    def normalize_path(self, path: str | Path) -> Path:
        """Lexically collapse ``.`` and ``..`` segments (no symlink resolution)."""
        return Path(os.path.normpath(str(path)))

    def create_original(
        self,
        upload: UploadedImage,
        output_file: Path,
        extension_type: ImageExtensionType,
        max_width: int,
        max_height: int,
        quality: float,
    ) -> None:
        log.debug(
            "Processing original image - name=%s size=%d content_type=%s output=%s",
            upload.filename,
            upload.size,
            upload.content_type,
            output_file,
        )
        if upload.is_empty():
            raise EmptyImageFileException()

        try:
            with self._open_image(upload.data) as image:
                log.debug("Decoded image: width=%d height=%d", image.width, image.height)
                resized = ImageOps.contain(image, (max_width, max_height), method=Image.Resampling.LANCZOS)
                self._write(resized, output_file, extension_type, quality)
        except ImageException:
            raise
        except Exception as e:
            log.error("Failed to process original image: %s", e, exc_info=True)
            raise ImageProcessingFailException() from e

        log.debug("Created original image at %s", output_file)

    def create_thumbnail(
        self,
        source_file: Path,
        output_file: Path,
        extension_type: ImageExtensionType,
        width: int,
        height: int,
        quality: float,
    ) -> None:
        try:
            with Image.open(source_file) as image:
                cropped = ImageOps.fit(
                    image,
                    (width, height),
                    method=Image.Resampling.LANCZOS,
                    centering=(0.5, 0.5),
                )
                self._write(cropped, output_file, extension_type, quality)
        except Exception as e:
            log.error("Failed to create thumbnail from %s: %s", source_file, e)
            raise ImageProcessingFailException() from e

    def clean_up(self, *files: Optional[Path]) -> None:
        for f in files:
            if f is None:
                continue
            path = Path(f)
            if not path.exists():
                continue
            try:
                path.unlink()
                log.debug("Cleaned up file: %s", path)
            except OSError:
                log.warning("Failed to cleanup file: %s", path, exc_info=True)

    # ------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------

    def _validate_signature(self, upload: UploadedImage) -> ImageExtensionType:
        header = upload.data[:HEADER_SIZE]
        if len(header) < 3:
            raise FileTooSmallException()

        kind = detect_image_signature(header)
        if kind is None:
            raise InvalidImageSignatureException()
        return kind

    def _open_image(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
        except Image.DecompressionBombError as e:
            raise ImageDimensionExceededException() from e
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            log.error("Image could not be decoded - file may not be a valid image: %s", e)
            raise CorruptedImageException() from e

        if image.width * image.height > self.settings.max_pixels:
            image.close()
            raise ImageDimensionExceededException(
                f"Image has {image.width * image.height} pixels, limit is {self.settings.max_pixels}"
            )

        try:
            image.load()
            transposed = ImageOps.exif_transpose(image)
        except (OSError, SyntaxError, ValueError) as e:
            image.close()
            log.error("Image data is truncated or corrupted: %s", e)
            raise CorruptedImageException() from e

        if transposed is not image:
            image.close()
        return transposed

    def _write(self, image: Image.Image, output_file: Path, extension_type: ImageExtensionType, quality: float) -> None:
        fmt = extension_type.pil_format
        prepared = _prepare_for_format(image, fmt)
        prepared.save(output_file, format=fmt, **_save_params(fmt, quality))
