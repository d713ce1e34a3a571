"""Adapter executors with status instrumentation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Tuple, TYPE_CHECKING

from observability.metrics import adapter_duration_seconds, adapter_errors_total
from resolver.constants import DEFAULT_ADAPTER_TIMEOUT_SECONDS
from resolver.models import AdapterStatusSnapshot, SourceResult
from utils.security import redact_secrets_from_text

if TYPE_CHECKING:
    from resolver.adapters.base import SourceAdapter

logger = logging.getLogger(__name__)


async def run_adapter_with_status(
    adapter: "SourceAdapter",
    sku: str,
    *,
    timeout_seconds: float = DEFAULT_ADAPTER_TIMEOUT_SECONDS,
) -> Tuple[Optional[SourceResult], AdapterStatusSnapshot]:
    """Run one adapter lookup; failures become an empty result plus a status."""
    adapter_id = adapter.adapter_id
    started = time.monotonic()
    try:
        # wait_for cancels the lookup once the timeout expires
        result = await asyncio.wait_for(adapter.lookup(sku), timeout=timeout_seconds)
        elapsed = time.monotonic() - started
        status = AdapterStatusSnapshot(
            adapter_id=adapter_id,
            status="ok" if result is not None else "empty",
            latency_ms=int(elapsed * 1000),
        )
        adapter_duration_seconds.labels(adapter=adapter_id, status=status.status).observe(elapsed)
        return result, status
    except asyncio.TimeoutError:
        elapsed = time.monotonic() - started
        logger.warning(f"[{adapter_id}] Lookup timed out after {timeout_seconds}s for {sku}")
        adapter_duration_seconds.labels(adapter=adapter_id, status="timeout").observe(elapsed)
        adapter_errors_total.labels(adapter=adapter_id, error_type="timeout").inc()
        status = AdapterStatusSnapshot(
            adapter_id=adapter_id,
            status="timeout",
            latency_ms=int(elapsed * 1000),
            message="Lookup timed out",
        )
        return None, status
    except Exception as e:
        elapsed = time.monotonic() - started
        # Upstream errors can echo query strings with keys in them
        error_msg = redact_secrets_from_text(str(e))
        logger.error(f"[{adapter_id}] Lookup error: {type(e).__name__}: {error_msg}")
        adapter_duration_seconds.labels(adapter=adapter_id, status="error").observe(elapsed)
        adapter_errors_total.labels(adapter=adapter_id, error_type="error").inc()
        status = AdapterStatusSnapshot(
            adapter_id=adapter_id,
            status="error",
            latency_ms=int(elapsed * 1000),
            message=f"Lookup failed: {error_msg[:100]}",
        )
        return None, status
