from .file_service import FileService
from .models import ImageDeleteBulkRequest, ImageExtensionType, UploadedImage
from .storage import ProfileImageStorageService, extract_view_id

__all__ = [
    "FileService",
    "ImageDeleteBulkRequest",
    "ImageExtensionType",
    "ProfileImageStorageService",
    "UploadedImage",
    "extract_view_id",
]
