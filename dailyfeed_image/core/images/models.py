"""Image domain types: stored formats, uploaded payloads and the bulk delete request."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageExtensionType(str, Enum):
    PNG = "PNG"
    JPG = "JPG"
    JPEG = "JPEG"
    GIF = "GIF"
    BMP = "BMP"
    WEBP = "WEBP"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        # Pillow knows JPG only as JPEG
        return "JPEG" if self in (ImageExtensionType.JPG, ImageExtensionType.JPEG) else self.value

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    def with_file_name(self, file_name: str) -> str:
        return f"{file_name}.{self.extension}"

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional["ImageExtensionType"]:
        _, dot, suffix = (file_name or "").rpartition(".")
        if not dot:
            return None
        try:
            return cls(suffix.upper())
        except ValueError:
            return None


_MEDIA_TYPES = {
    ImageExtensionType.PNG: "image/png",
    ImageExtensionType.JPG: "image/jpeg",
    ImageExtensionType.JPEG: "image/jpeg",
    ImageExtensionType.GIF: "image/gif",
    ImageExtensionType.BMP: "image/bmp",
    ImageExtensionType.WEBP: "image/webp",
}


@dataclass(frozen=True)
class UploadedImage:
    """An uploaded file as received from a multipart request."""

    filename: Optional[str]
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return not self.data


class ImageDeleteBulkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_urls: Optional[List[str]] = Field(default=None, alias="imageUrls")
