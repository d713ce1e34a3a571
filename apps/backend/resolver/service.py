"""Resolution orchestrator.

resolve() runs strictly in order: validate, classify, cache lookup, then the
source adapters one at a time in priority order until one returns a
candidate. The winner is normalized, scored and, when confident enough,
written back to the cache. Nothing is merged across adapters.
"""

from __future__ import annotations

import logging
import os
import time
from typing import List, Optional, Sequence

from exceptions import ValidationError
from observability.metrics import cache_lookups_total, cache_writes_total
from resolver.adapters.base import SourceAdapter
from resolver.cache.base import BaseCacheStore
from resolver.classifier import (
    classify_sku,
    detect_brand_from_text,
    extract_skus_from_text,
    extract_us_size,
)
from resolver.constants import (
    CACHE_CONFIDENCE_THRESHOLD,
    CACHE_SOURCE,
    DEFAULT_ADAPTER_TIMEOUT_SECONDS,
    NO_MATCH_ERROR,
)
from resolver.executors import run_adapter_with_status
from resolver.metrics import track_resolution
from resolver.models import (
    AdapterStatusSnapshot,
    ConfidenceInputs,
    ResolutionResponse,
    ScanResponse,
    SourceResult,
)
from resolver.normalizer import normalize_result
from resolver.scorer import calculate_confidence
from resolver.validation import validate_query

logger = logging.getLogger(__name__)

NO_SKU_IN_TEXT_ERROR = "No SKU detected in text"


def adapter_timeout_from_env() -> float:
    raw = os.getenv("RESOLVER_ADAPTER_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_ADAPTER_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"[ResolutionService] Bad RESOLVER_ADAPTER_TIMEOUT_SECONDS={raw!r}, using default")
        return DEFAULT_ADAPTER_TIMEOUT_SECONDS


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ResolutionService:
    """Resolves style codes against a cache store and an ordered adapter chain.

    Constructed once per process; the cache store is the only shared state.
    """

    def __init__(
        self,
        cache: BaseCacheStore,
        adapters: Sequence[SourceAdapter],
        *,
        adapter_timeout_seconds: Optional[float] = None,
    ):
        self.cache = cache
        self.adapters: List[SourceAdapter] = list(adapters)
        self.adapter_timeout_seconds = (
            adapter_timeout_seconds if adapter_timeout_seconds is not None else adapter_timeout_from_env()
        )

    async def resolve(self, query: object) -> ResolutionResponse:
        """Resolve one query.

        Raises ValidationError for unusable input. A total miss is not an
        exception: it comes back as success=False with "No match found".
        """
        started = time.monotonic()
        with track_resolution(query) as metrics:
            try:
                trimmed = validate_query(query)
            except ValidationError:
                metrics.outcome = "invalid"
                raise

            classification = classify_sku(trimmed)
            key = classification.normalized
            if not key:
                metrics.outcome = "invalid"
                raise ValidationError("Query could not be normalized")
            metrics.normalized = key

            # Cache first; a hit never touches the adapters
            cached = await self.cache.get(key)
            if cached is not None:
                cache_lookups_total.labels(result="hit").inc()
                # A cached record is an exact match for its own key
                confidence = round(calculate_confidence(
                    ConfidenceInputs.for_record(
                        cached.record,
                        pattern_confidence=classification.confidence,
                        source=CACHE_SOURCE,
                        exact_match=True,
                        from_cache=True,
                    )
                ), 2)
                metrics.outcome = "cache_hit"
                metrics.source = CACHE_SOURCE
                metrics.confidence = confidence
                return ResolutionResponse(
                    success=True,
                    input=trimmed,
                    resolved=cached.record,
                    confidence=confidence,
                    source=CACHE_SOURCE,
                    classification=classification,
                    timing_ms=_elapsed_ms(started),
                )
            cache_lookups_total.labels(result="miss").inc()

            # Miss: walk the adapter chain
            result, statuses = await self._run_adapters(key)
            for status in statuses:
                metrics.record_adapter(status)

            if result is None:
                metrics.outcome = "no_match"
                return ResolutionResponse(
                    success=False,
                    input=trimmed,
                    classification=classification,
                    timing_ms=_elapsed_ms(started),
                    error=NO_MATCH_ERROR,
                    adapter_statuses=statuses,
                )

            record = normalize_result(result)
            score = calculate_confidence(
                ConfidenceInputs.for_record(
                    record,
                    pattern_confidence=classification.confidence,
                    source=result.source_name,
                    exact_match=result.exact_match,
                )
            )

            # Low-confidence answers are returned but never cached
            if score >= CACHE_CONFIDENCE_THRESHOLD:
                await self.cache.set(key, record, result.source_name, score)
                cache_writes_total.labels(source=result.source_name).inc()
                metrics.cached = True
            else:
                logger.info(f"[ResolutionService] Not caching {key}: confidence {score:.2f} below threshold")

            confidence = round(score, 2)
            metrics.outcome = "source_hit"
            metrics.source = result.source_name
            metrics.confidence = confidence
            return ResolutionResponse(
                success=True,
                input=trimmed,
                resolved=record,
                confidence=confidence,
                source=result.source_name,
                classification=classification,
                timing_ms=_elapsed_ms(started),
                adapter_statuses=statuses,
            )

    async def _run_adapters(self, sku: str) -> tuple[Optional[SourceResult], List[AdapterStatusSnapshot]]:
        """Call adapters in priority order; the first non-empty result wins."""
        statuses: List[AdapterStatusSnapshot] = []
        for index, adapter in enumerate(self.adapters):
            result, status = await run_adapter_with_status(
                adapter, sku, timeout_seconds=self.adapter_timeout_seconds
            )
            statuses.append(status)
            # Adapters after the winner are never called
            if result is not None:
                statuses.extend(
                    AdapterStatusSnapshot(adapter_id=rest.adapter_id, status="skipped")
                    for rest in self.adapters[index + 1:]
                )
                return result, statuses
        return None, statuses

    async def resolve_scan(
        self,
        sku: str,
        us_size: Optional[str] = None,
        brand_hint: Optional[str] = None,
        raw_text: Optional[str] = None,
    ) -> ScanResponse:
        """Resolve an identifier read off a tag, echoing the hints it came with."""
        resolution = await self.resolve(sku)
        return ScanResponse(
            **resolution.model_dump(),
            sku=resolution.classification.normalized or sku,
            us_size=us_size,
            brand_hint=brand_hint,
            raw_text=raw_text,
        )

    async def resolve_text(self, text: str) -> ScanResponse:
        """Pick the best identifier out of an OCR text block and resolve it."""
        started = time.monotonic()
        candidates = extract_skus_from_text(text)
        us_size = extract_us_size(text)
        brand_hint = detect_brand_from_text(text)

        if not candidates:
            logger.info("[ResolutionService] No SKU candidates in scanned text")
            return ScanResponse(
                success=False,
                input=(text or "").strip(),
                timing_ms=_elapsed_ms(started),
                error=NO_SKU_IN_TEXT_ERROR,
                step_failed="sku_extraction",
                us_size=us_size,
                brand_hint=brand_hint,
                raw_text=text,
            )

        best = candidates[0]
        logger.info(
            f"[ResolutionService] {len(candidates)} SKU candidates in text, "
            f"resolving {best.sku} ({best.brand}, {best.confidence:.2f})"
        )
        return await self.resolve_scan(best.sku, us_size=us_size, brand_hint=brand_hint, raw_text=text)
