from __future__ import annotations

from enum import Enum


class ImageExceptionCode(Enum):
    IMAGE_FILE_REQUIRED = (400, "Image file is required")
    FILE_TOO_LARGE = (413, "Image file exceeds the maximum allowed size")
    UNSUPPORTED_IMAGE_FORMAT = (415, "Unsupported image format")
    FILE_TOO_SMALL = (400, "Image file is too small to be a valid image")
    INVALID_IMAGE_SIGNATURE = (400, "File content is not a supported image")
    EMPTY_IMAGE_FILE = (400, "Image file is empty")
    CORRUPTED_IMAGE = (400, "Image file is corrupted")
    IMAGE_DIMENSION_EXCEEDED = (400, "Image dimensions exceed the allowed pixel count")
    IMAGE_PROCESSING_FAIL = (500, "Failed to process image")
    IMAGE_READING_FAIL = (404, "Image not found")

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message


class ImageException(Exception):
    code: ImageExceptionCode = ImageExceptionCode.IMAGE_PROCESSING_FAIL

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.code.message)
        self.detail = detail

    @property
    def status_code(self) -> int:
        return self.code.status_code

    @property
    def message(self) -> str:
        return self.code.message


class ImageFileRequiredException(ImageException):
    code = ImageExceptionCode.IMAGE_FILE_REQUIRED


class FileTooLargeException(ImageException):
    code = ImageExceptionCode.FILE_TOO_LARGE


class UnsupportedImageFormatException(ImageException):
    code = ImageExceptionCode.UNSUPPORTED_IMAGE_FORMAT


class FileTooSmallException(ImageException):
    code = ImageExceptionCode.FILE_TOO_SMALL


class InvalidImageSignatureException(ImageException):
    code = ImageExceptionCode.INVALID_IMAGE_SIGNATURE


class EmptyImageFileException(ImageException):
    code = ImageExceptionCode.EMPTY_IMAGE_FILE


class CorruptedImageException(ImageException):
    code = ImageExceptionCode.CORRUPTED_IMAGE


class ImageDimensionExceededException(ImageException):
    code = ImageExceptionCode.IMAGE_DIMENSION_EXCEEDED


class ImageProcessingFailException(ImageException):
    code = ImageExceptionCode.IMAGE_PROCESSING_FAIL


class ImageReadingFailException(ImageException):
    code = ImageExceptionCode.IMAGE_READING_FAIL
