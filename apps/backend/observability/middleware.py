"""
FastAPI middleware for observability.

Provides:
- Request correlation ID injection
- RED metrics per sanitized route
- Request/response logging
"""

import re
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .logging import get_logger, correlation_id_context
from .metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
)

logger = get_logger(__name__)

_SKU_PATH = re.compile(r"^/resolve/[^/]+$")


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Correlation IDs, RED metrics and request logging for every request."""

    def __init__(self, app: ASGIApp, enable_request_logging: bool = True):
        super().__init__(app)
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse the caller's request ID when it sends one
        correlation_id = request.headers.get("X-Request-ID") or request.headers.get("X-Correlation-ID")

        with correlation_id_context(correlation_id) as req_id:
            # Expose to handlers and exception logging
            request.state.correlation_id = req_id

            # Metric labels use the sanitized route
            path = sanitize_path(request.url.path)
            method = request.method
            quiet = is_health_check(request.url.path)

            # Track in-progress requests
            http_requests_in_progress.labels(method=method, endpoint=path).inc()
            start_time = time.time()

            try:
                if self.enable_request_logging and not quiet:
                    logger.info(
                        "Request started",
                        extra={
                            "method": method,
                            "path": path,
                            "client_host": request.client.host if request.client else None,
                        },
                    )

                # Process request
                response = await call_next(request)
                duration = time.time() - start_time

                # Record metrics
                http_requests_total.labels(
                    method=method,
                    endpoint=path,
                    status=response.status_code,
                ).inc()
                http_request_duration_seconds.labels(
                    method=method,
                    endpoint=path,
                ).observe(duration)

                response.headers["X-Request-ID"] = req_id

                if self.enable_request_logging and not quiet:
                    logger.info(
                        "Request completed",
                        extra={
                            "method": method,
                            "path": path,
                            "status_code": response.status_code,
                            "duration_seconds": round(duration, 3),
                        },
                    )

                # Adapter timeouts put a slow resolution at 8s per source
                if duration > 2.0 and not quiet:
                    logger.warning(
                        "Slow request detected",
                        extra={
                            "method": method,
                            "path": path,
                            "duration_seconds": round(duration, 3),
                        },
                    )

                return response

            except Exception as exc:
                duration = time.time() - start_time

                # Unhandled exceptions count as 500
                http_requests_total.labels(
                    method=method,
                    endpoint=path,
                    status=500,
                ).inc()
                http_request_duration_seconds.labels(
                    method=method,
                    endpoint=path,
                ).observe(duration)

                logger.error(
                    "Request failed",
                    extra={
                        "method": method,
                        "path": path,
                        "duration_seconds": round(duration, 3),
                        "error_type": type(exc).__name__,
                    },
                    exc_info=True,
                )
                # Let the app exception handlers build the response
                raise

            finally:
                http_requests_in_progress.labels(method=method, endpoint=path).dec()


def sanitize_path(path: str) -> str:
    """Collapse per-identifier paths so metric labels stay bounded."""
    if _SKU_PATH.match(path):
        return "/resolve/{sku}"
    return re.sub(r"/\d+", "/{id}", path)


def is_health_check(path: str) -> bool:
    return path.startswith("/health") or path.startswith("/metrics")
