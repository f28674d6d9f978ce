# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: request ids, the shared access-token gate, and Prometheus
request metrics. Registered in main.py.
"""

import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from app.core.config import settings
from app.core.dependencies import get_access_service
from app.metrics.prometheus import (
    ACCESS_DENIED,
    HTTP_ERRORS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
)

# Route segments kept verbatim in metric labels; anything else is a parameter.
ROUTE_SEGMENTS: frozenset[str] = frozenset({
    "api", "v1", "teams", "order", "schedule", "summary", "export",
    "overrides", "swaps", "approve", "reject", "songs", "import",
    "history", "auth", "verify",
})

UNMETERED_PATHS: frozenset[str] = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def route_template(path: str) -> str:
    """``/api/v1/overrides/2026-01-04`` -> ``/api/v1/overrides/{date}``."""
    segments = []
    for segment in path.strip("/").split("/"):
        if not segment or segment in ROUTE_SEGMENTS:
            segments.append(segment)
        elif _ISO_DATE.match(segment):
            segments.append("{date}")
        elif segment.isdigit():
            segments.append("{id}")
        else:
            segments.append("{slug}")
    return "/" + "/".join(segments)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Reject requests without a valid access token once tokens are configured."""

    async def dispatch(self, request: Request, call_next):
        access = get_access_service()
        if (
            not access.enabled
            or request.method == "OPTIONS"
            or request.url.path in settings.ACCESS_BYPASS_PATHS
        ):
            return await call_next(request)

        token = request.headers.get("X-Access-Token") or request.query_params.get("access")
        if access.validate_token(token):
            return await call_next(request)

        ACCESS_DENIED.inc()
        return JSONResponse(
            status_code=401,
            content={"detail": "Invalid or missing access token"},
        )


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNMETERED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = route_template(request.url.path)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
        return response
