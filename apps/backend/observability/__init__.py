"""
Observability infrastructure for the SKU resolver backend.

Provides:
- Structured logging with correlation IDs
- Prometheus metrics
- Request middleware (correlation IDs, RED metrics)
"""

from .logging import get_logger, correlation_id_context, get_correlation_id
from .metrics import (
    metrics_registry,
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
    resolutions_total,
    resolution_duration_seconds,
    cache_lookups_total,
    cache_writes_total,
    adapter_duration_seconds,
    adapter_errors_total,
)

__all__ = [
    "get_logger",
    "correlation_id_context",
    "get_correlation_id",
    "metrics_registry",
    "http_requests_total",
    "http_request_duration_seconds",
    "http_requests_in_progress",
    "resolutions_total",
    "resolution_duration_seconds",
    "cache_lookups_total",
    "cache_writes_total",
    "adapter_duration_seconds",
    "adapter_errors_total",
]
