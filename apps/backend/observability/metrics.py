"""
Prometheus metrics for the SKU resolver backend.

HTTP traffic is tracked as RED metrics (Rate, Errors, Duration); the
resolution pipeline exports outcome, cache and per-adapter series.
"""

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    REGISTRY,
)

metrics_registry = REGISTRY

# HTTP Metrics (RED - Rate, Errors, Duration)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=metrics_registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
    registry=metrics_registry,
)

# Resolution pipeline
resolutions_total = Counter(
    "resolutions_total",
    "Total resolve() calls by outcome",
    ["outcome"],  # cache_hit, source_hit, no_match, invalid
    registry=metrics_registry,
)

resolution_duration_seconds = Histogram(
    "resolution_duration_seconds",
    "End-to-end resolution duration in seconds",
    ["outcome"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)

cache_lookups_total = Counter(
    "cache_lookups_total",
    "Total cache lookups",
    ["result"],  # hit, miss
    registry=metrics_registry,
)

cache_writes_total = Counter(
    "cache_writes_total",
    "Total cache writes",
    ["source"],
    registry=metrics_registry,
)

# Source adapters
adapter_duration_seconds = Histogram(
    "adapter_duration_seconds",
    "Source adapter lookup duration in seconds",
    ["adapter", "status"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
    registry=metrics_registry,
)

adapter_errors_total = Counter(
    "adapter_errors_total",
    "Total source adapter failures",
    ["adapter", "error_type"],  # error_type: timeout, error
    registry=metrics_registry,
)
