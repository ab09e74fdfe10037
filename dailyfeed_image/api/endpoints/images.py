from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from dailyfeed_image.api.dependencies import get_storage_service
from dailyfeed_image.api.schemas import ServerResponse
from dailyfeed_image.core.images import (
    ImageDeleteBulkRequest,
    ImageExtensionType,
    ProfileImageStorageService,
    UploadedImage,
)
from dailyfeed_image.core.images.errors import ImageReadingFailException
from dailyfeed_image.core.images.storage import STORED_EXTENSION

router = APIRouter(prefix="/api/images", tags=["images"])

# Suffixes the view endpoint honours when picking Content-Type
_VIEW_MEDIA_TYPES = {
    ImageExtensionType.PNG: "image/png",
    ImageExtensionType.GIF: "image/gif",
    ImageExtensionType.WEBP: "image/webp",
}


async def _read_upload(image: Optional[UploadFile], limit: int) -> Optional[UploadedImage]:
    if image is None:
        return None
    # one byte past the limit is enough to reject oversize files
    data = await image.read(limit + 1)
    return UploadedImage(filename=image.filename, content_type=image.content_type, data=data)


async def _store(image: Optional[UploadFile], service: ProfileImageStorageService) -> ServerResponse:
    upload = await _read_upload(image, service.settings.max_file_size)
    image_id = await run_in_threadpool(service.store, upload)
    return ServerResponse.ok(image_id)


@router.post("/upload", response_model=ServerResponse)
async def upload_image(
    image: Optional[UploadFile] = File(default=None),
    service: ProfileImageStorageService = Depends(get_storage_service),
):
    return await _store(image, service)


@router.post("/upload/profile", response_model=ServerResponse)
async def upload_profile_image(
    image: Optional[UploadFile] = File(default=None),
    service: ProfileImageStorageService = Depends(get_storage_service),
):
    return await _store(image, service)


@router.get("/view/{image_id}")
def get_image(
    image_id: str,
    thumbnail: bool = Query(default=False),
    service: ProfileImageStorageService = Depends(get_storage_service),
):
    path = service.get(image_id, thumbnail)
    if path is None:
        raise ImageReadingFailException()

    requested = ImageExtensionType.from_file_name(image_id)
    media_type = _VIEW_MEDIA_TYPES.get(requested, STORED_EXTENSION.media_type)
    return FileResponse(
        path,
        media_type=media_type,
        headers={"Content-Disposition": f'inline; filename="{image_id}"'},
    )


@router.post("/view/command/delete/in", response_model=ServerResponse)
def delete_images(
    req: ImageDeleteBulkRequest,
    service: ProfileImageStorageService = Depends(get_storage_service),
):
    service.delete_images(req)
    return ServerResponse.ok(True)
