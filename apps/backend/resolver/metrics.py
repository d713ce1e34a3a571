"""Per-resolution observability.

Each resolve() call is tracked in its own ResolutionMetrics and ends with a
single structured "resolution complete" log record plus Prometheus updates.
Outcomes:
- cache_hit: served from the cache store
- source_hit: an adapter produced the winning candidate
- no_match: cache and every adapter came back empty
- invalid: the query failed validation
- error: an unexpected exception escaped the pipeline
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from observability.metrics import resolution_duration_seconds, resolutions_total
from resolver.models import AdapterStatusSnapshot

logger = logging.getLogger("resolver.metrics")


@dataclass
class ResolutionMetrics:
    """Everything observed during one resolve() call."""
    query: str = ""
    normalized: str = ""
    outcome: str = "error"
    source: Optional[str] = None
    confidence: Optional[float] = None
    cached: bool = False
    adapter_statuses: List[AdapterStatusSnapshot] = field(default_factory=list)
    total_latency_ms: float = 0.0

    def record_adapter(self, status: AdapterStatusSnapshot) -> None:
        self.adapter_statuses.append(status)

    def adapters_failed(self) -> int:
        return sum(1 for s in self.adapter_statuses if s.status in ("timeout", "error"))


@contextmanager
def track_resolution(query: str) -> Iterator[ResolutionMetrics]:
    metrics = ResolutionMetrics(query=query if isinstance(query, str) else "")
    started = time.monotonic()
    try:
        yield metrics
    finally:
        elapsed = time.monotonic() - started
        metrics.total_latency_ms = elapsed * 1000
        resolutions_total.labels(outcome=metrics.outcome).inc()
        resolution_duration_seconds.labels(outcome=metrics.outcome).observe(elapsed)
        _log_metrics(metrics)


def _log_metrics(m: ResolutionMetrics) -> None:
    log_data = {
        "event": "resolution_complete",
        "sku": m.normalized or None,
        "query_length": len(m.query),
        "outcome": m.outcome,
        "source": m.source,
        "confidence": m.confidence,
        "cached": m.cached,
        "adapters": [
            {
                "id": s.adapter_id,
                "status": s.status,
                "latency_ms": s.latency_ms,
            }
            for s in m.adapter_statuses
        ],
        "latency_ms": round(m.total_latency_ms, 1),
    }

    if m.outcome == "error":
        logger.error("Resolution failed", extra=log_data)
    elif m.outcome == "no_match" and m.adapters_failed():
        logger.warning("Resolution complete - no match, adapter failures", extra=log_data)
    elif m.outcome in ("no_match", "invalid"):
        logger.info(f"Resolution complete - {m.outcome}", extra=log_data)
    else:
        logger.info("Resolution complete", extra=log_data)
