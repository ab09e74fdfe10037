"""Exception handlers that shape errors into the dailyfeed error envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from dailyfeed_image.api.schemas import ErrorResponse
from dailyfeed_image.core.images.errors import ImageException

log = logging.getLogger("dailyfeed.errors")

INVALID_REQUEST_REASON = "Invalid request"


def _envelope(request: Request, status: int, reason: str) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    body = ErrorResponse.of(status, reason, request.url.path, request_id=rid)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json", exclude_none=True))


async def handle_image_exception(request: Request, exc: ImageException) -> JSONResponse:
    log.warning("Image exception occurred: %s, path: %s", exc, request.url.path)
    return _envelope(request, exc.status_code, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning("Request validation failed: %s, path: %s", exc.errors(), request.url.path)
    return _envelope(request, 422, INVALID_REQUEST_REASON)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ImageException, handle_image_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
