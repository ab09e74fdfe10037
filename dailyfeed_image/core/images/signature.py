from __future__ import annotations

from typing import Optional

from .models import ImageExtensionType

HEADER_SIZE = 12

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
GIF_SIGNATURE = b"GIF"
BMP_SIGNATURE = b"BM"
RIFF_SIGNATURE = b"RIFF"
WEBP_MARKER = b"WEBP"

_PREFIXES = (
    (JPEG_SIGNATURE, ImageExtensionType.JPEG),
    (PNG_SIGNATURE, ImageExtensionType.PNG),
    (GIF_SIGNATURE, ImageExtensionType.GIF),
    (BMP_SIGNATURE, ImageExtensionType.BMP),
)


def detect_image_signature(header: bytes) -> Optional[ImageExtensionType]:
    """Match the leading magic bytes of ``header`` against the supported formats."""
    head = bytes(header[:HEADER_SIZE])
    for prefix, kind in _PREFIXES:
        if head.startswith(prefix):
            return kind

    # RIFF....WEBP
    if head.startswith(RIFF_SIGNATURE) and len(head) >= HEADER_SIZE and head[8:12] == WEBP_MARKER:
        return ImageExtensionType.WEBP
    return None
