"""Source adapter registry.

Adapters are returned in priority order: the paid, most authoritative source
first, free fallbacks after it. The service stops at the first one that
returns a candidate, so this order decides which source wins.
"""

from __future__ import annotations

import logging
import os
from typing import List

from resolver.adapters.base import SourceAdapter
from resolver.adapters.kicksdb import KicksDBAdapter
from resolver.adapters.sneaks import DEFAULT_SNEAKS_URL, SneaksAdapter

logger = logging.getLogger(__name__)


def build_default_adapters() -> List[SourceAdapter]:
    adapters: List[SourceAdapter] = []

    # KicksDB - paid API, only when a key is configured
    kicksdb_key = os.getenv("KICKSDB_API_KEY")
    if kicksdb_key:
        adapters.append(KicksDBAdapter(kicksdb_key))
    else:
        logger.warning("[adapters] KICKSDB_API_KEY not set, KicksDB adapter disabled")

    # Sneaks - free fallback, on unless explicitly disabled
    sneaks_enabled = (os.getenv("SNEAKS_ENABLED", "true") or "").strip().lower()
    if sneaks_enabled not in ("0", "false", "no", "off"):
        adapters.append(SneaksAdapter(os.getenv("SNEAKS_API_URL") or DEFAULT_SNEAKS_URL))

    logger.info(f"[adapters] Resolution chain: {[a.adapter_id for a in adapters]}")
    return adapters


def available_adapter_ids(adapters: List[SourceAdapter]) -> List[str]:
    return [adapter.adapter_id for adapter in adapters]


__all__ = [
    "KicksDBAdapter",
    "SneaksAdapter",
    "SourceAdapter",
    "available_adapter_ids",
    "build_default_adapters",
]
