from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dailyfeed_image import __version__
from dailyfeed_image.api.endpoints import health, images
from dailyfeed_image.api.endpoints import metrics_export
from dailyfeed_image.api.errors import register_exception_handlers
from dailyfeed_image.api.middleware.error_shaping import SafeErrorMiddleware
from dailyfeed_image.api.middleware.request_context import (
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)

app = FastAPI(
    title="Dailyfeed Image API",
    version=__version__,
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order: the LAST call is the OUTERMOST wrapper.
# Runtime order (outermost -> innermost):
#   SafeErrorMiddleware -> CORSMiddleware -> SecurityHeaders -> RequestContext -> handler
# ------------------------------------------------------------

env = (os.getenv("DAILYFEED_ENV") or "dev").strip().lower()

# Request context (request_id + metrics)
app.add_middleware(RequestContextMiddleware)

# Security headers (on in prod by default)
sec_enabled = (os.getenv("DAILYFEED_SECURITY_HEADERS_ENABLED") or ("true" if env == "prod" else "false")).strip().lower() in (
    "1",
    "true",
    "yes",
)
app.add_middleware(SecurityHeadersMiddleware, enabled=sec_enabled)

_cors_origins_raw = os.getenv("DAILYFEED_CORS_ORIGINS", "").strip()
_cors_origins = [o.strip() for o in _cors_origins_raw.split(",") if o.strip()] if _cors_origins_raw else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Outermost: catches all exceptions from inner middleware
app.add_middleware(SafeErrorMiddleware)

register_exception_handlers(app)

app.include_router(images.router)
app.include_router(health.router)
app.include_router(metrics_export.router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
