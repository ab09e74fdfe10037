from __future__ import annotations

from prometheus_client import Counter, Histogram

IMAGES_STORED_TOTAL = Counter(
    "dailyfeed_images_stored_total",
    "Images stored (original + thumbnail written)",
)

IMAGES_REJECTED_TOTAL = Counter(
    "dailyfeed_images_rejected_total",
    "Image uploads rejected or failed",
    ["reason"],
)

IMAGES_DELETED_TOTAL = Counter(
    "dailyfeed_images_deleted_total",
    "Image ids removed by bulk delete",
)

IMAGE_PROCESSING_SECONDS = Histogram(
    "dailyfeed_image_processing_seconds",
    "Time spent validating, resizing and writing an uploaded image",
)


def inc_rejected(reason: str) -> None:
    IMAGES_REJECTED_TOTAL.labels(reason=(reason or "unknown").lower()).inc()
