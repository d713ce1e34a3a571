"""
Confidence scoring for resolution results.

The score is a weighted sum of independent signals, clamped to [0, 1]:
  - pattern confidence from the classifier (x 0.30)
  - exact identifier match (+0.25)
  - source reliability (per-source constant)
  - brand / model / colorway present (+0.10 each)
  - served from cache (+0.05)

Every boolean signal only ever adds, so flipping one on never lowers the score.
The scorer never filters; the caching threshold belongs to the service.
"""

from typing import Dict

from resolver.models import ConfidenceInputs


PATTERN_WEIGHT = 0.30
EXACT_MATCH_BONUS = 0.25
FIELD_BONUS = 0.10
CACHE_BONUS = 0.05

SOURCE_RELIABILITY: Dict[str, float] = {
    "cache": 0.15,
    "kicksdb": 0.15,
    "sneaks": 0.12,
    "google": 0.08,
    "unknown": 0.02,
}


def source_reliability(source: str) -> float:
    return SOURCE_RELIABILITY.get(source, SOURCE_RELIABILITY["unknown"])


def calculate_confidence(inputs: ConfidenceInputs) -> float:
    # Pattern match
    score = inputs.pattern_confidence * PATTERN_WEIGHT

    if inputs.exact_match:
        score += EXACT_MATCH_BONUS

    # Source reliability
    score += source_reliability(inputs.source)

    # Completeness
    if inputs.has_brand:
        score += FIELD_BONUS
    if inputs.has_model:
        score += FIELD_BONUS
    if inputs.has_colorway:
        score += FIELD_BONUS

    # Cached results were good enough to cache once
    if inputs.from_cache:
        score += CACHE_BONUS

    return min(1.0, max(0.0, score))


def confidence_level(confidence: float) -> str:
    if confidence >= 0.8:
        return "high"
    if confidence >= 0.5:
        return "medium"
    return "low"
