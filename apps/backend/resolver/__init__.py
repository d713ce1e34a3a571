"""SKU resolution pipeline.

Classifier -> cache store -> source adapters -> normalizer -> confidence scorer,
composed by ResolutionService.
"""

from resolver.adapters import build_default_adapters
from resolver.cache import create_cache_store
from resolver.classifier import classify_sku, normalize_sku
from resolver.models import (
    Classification,
    NormalizedRecord,
    ResolutionResponse,
    ScanResponse,
    SourceResult,
)
from resolver.service import ResolutionService

__all__ = [
    "Classification",
    "NormalizedRecord",
    "ResolutionResponse",
    "ResolutionService",
    "ScanResponse",
    "SourceResult",
    "build_default_adapters",
    "classify_sku",
    "create_cache_store",
    "normalize_sku",
]
