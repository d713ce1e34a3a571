"""
Health check utilities for dependency monitoring.

Provides checks for:
- Cache store connectivity (entry counts double as a smoke test)
- Source adapter configuration
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .logging import get_logger

logger = get_logger(__name__)


class HealthCheckResult:
    """Result of a health check."""

    def __init__(self, name: str, status: str, details: Optional[Dict[str, Any]] = None, error: Optional[str] = None):
        self.name = name
        self.status = status  # "ok", "degraded", "error"
        self.details = details or {}
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "details": self.details,
        }
        if self.error:
            result["error"] = self.error
        return result

    @property
    def is_healthy(self) -> bool:
        return self.status == "ok"


async def check_cache_store(cache, timeout: float = 5.0) -> HealthCheckResult:
    """Read cache stats within ``timeout`` seconds."""
    start_time = time.time()

    try:
        stats = await asyncio.wait_for(cache.stats(), timeout=timeout)
        latency = time.time() - start_time
        return HealthCheckResult(
            name="cache",
            status="ok",
            details={
                "backend": getattr(cache, "backend_name", "unknown"),
                "latency_ms": round(latency * 1000, 2),
                "total": stats.total,
                "recent_hits": stats.recent_hits,
            },
        )

    except asyncio.TimeoutError:
        return HealthCheckResult(
            name="cache",
            status="error",
            error=f"Cache stats timeout after {timeout}s",
        )

    except Exception as e:
        logger.error("Cache health check failed", exc_info=True)
        return HealthCheckResult(
            name="cache",
            status="error",
            error=str(e)[:200],
        )


def check_adapters(adapters: List[Any]) -> HealthCheckResult:
    """No adapters means every cache miss ends in "No match found"."""
    adapter_ids = [adapter.adapter_id for adapter in adapters]
    if not adapter_ids:
        return HealthCheckResult(
            name="adapters",
            status="degraded",
            error="No source adapters configured",
        )
    return HealthCheckResult(name="adapters", status="ok", details={"chain": adapter_ids})


async def run_health_checks(cache, adapters: List[Any]) -> Dict[str, Any]:
    """Run all health checks and return aggregated results."""
    checks = {
        "cache": await check_cache_store(cache),
        "adapters": check_adapters(adapters),
    }

    # Any error is fatal; anything else short of ok only degrades
    if any(check.status == "error" for check in checks.values()):
        overall_status = "unhealthy"
    elif not all(check.is_healthy for check in checks.values()):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {name: check.to_dict() for name, check in checks.items()},
    }
