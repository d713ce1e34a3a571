"""Typed models for the SKU resolution pipeline."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from resolver.constants import DEFAULT_CATEGORY, UNKNOWN_BRAND

AdapterStatus = Literal["ok", "empty", "timeout", "error", "skipped"]


class Classification(BaseModel):
    """Brand guess and normalized identifier for a raw query."""

    brand: str = UNKNOWN_BRAND
    confidence: float = Field(0.0, ge=0.0, le=1.0, description="Pattern match confidence")
    normalized: str = ""


class ExtractedSku(BaseModel):
    """Identifier candidate pulled out of a free-text block."""

    sku: str
    brand: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class SourceResult(BaseModel):
    """Raw candidate returned by a single source adapter."""

    brand: Optional[str] = None
    name: Optional[str] = None
    model: Optional[str] = None
    colorway: Optional[str] = None
    category: Optional[str] = None
    returned_id: str
    source_name: str
    exact_match: bool = False
    raw_payload: Dict[str, Any] = Field(default_factory=dict)


class NormalizedRecord(BaseModel):
    """Canonical product metadata returned to callers and cached."""

    brand: Optional[str] = None
    name: Optional[str] = None
    model: Optional[str] = None
    colorway: Optional[str] = None
    category: str = DEFAULT_CATEGORY


class ConfidenceInputs(BaseModel):
    """Independent signals combined by the confidence scorer."""

    pattern_confidence: float = Field(0.5, ge=0.0, le=1.0)
    source: str = "unknown"
    exact_match: bool = False
    has_brand: bool = False
    has_model: bool = False
    has_colorway: bool = False
    from_cache: bool = False

    @classmethod
    def for_record(
        cls,
        record: NormalizedRecord,
        *,
        pattern_confidence: float,
        source: str,
        exact_match: bool,
        from_cache: bool = False,
    ) -> "ConfidenceInputs":
        return cls(
            pattern_confidence=pattern_confidence,
            source=source,
            exact_match=exact_match,
            has_brand=bool(record.brand),
            has_model=bool(record.model),
            has_colorway=bool(record.colorway),
            from_cache=from_cache,
        )


class CacheEntry(BaseModel):
    """One cached resolution, keyed by normalized identifier.

    Timestamps are epoch milliseconds.
    """

    key: str
    record: NormalizedRecord
    source_name: str
    confidence: float = 0.0
    created_at: int
    accessed_at: int
    access_count: int = 1


class CacheStats(BaseModel):
    total: int = 0
    recent_hits: int = 0


class AdapterStatusSnapshot(BaseModel):
    adapter_id: str
    status: AdapterStatus
    latency_ms: Optional[int] = None
    message: Optional[str] = None


class ResolutionResponse(BaseModel):
    """Outcome of one resolve() call.

    ``confidence``, ``source`` and ``resolved`` are only set on success;
    ``error`` is only set on failure.
    """

    success: bool
    input: str
    resolved: Optional[NormalizedRecord] = None
    confidence: Optional[float] = None
    source: Optional[str] = None
    classification: Classification = Field(default_factory=Classification)
    timing_ms: int = 0
    error: Optional[str] = None
    adapter_statuses: List[AdapterStatusSnapshot] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, exclude={"adapter_statuses"})


class ScanResponse(ResolutionResponse):
    """Resolution of an identifier extracted from a tag image, with its hints."""

    sku: Optional[str] = None
    us_size: Optional[str] = None
    brand_hint: Optional[str] = None
    raw_text: Optional[str] = None
    step_failed: Optional[Literal["sku_extraction"]] = None
