"""Prometheus metrics scrape endpoints.

Read-only: exposes the default registry in the text exposition format at
``/metrics`` and at the actuator-style ``/actuator/prometheus``.
"""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
@router.get("/actuator/prometheus", include_in_schema=False)
def prometheus_metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
