"""SKU classifier: detects the likely brand from a style code's shape.

Pattern examples:
    Nike/Jordan   CT8527-100, DD1391-100, DM7866-200
    Adidas        GX1234, FY2903, H67123
    New Balance   M990GL5, W990GL5, ML574EGG
    Puma          384692-01
    Converse      162050C, M9160C
    Vans          VN0A38F7PXP
    Asics         1011A792-100

BRAND_RULES is evaluated top-down and the first rule with a matching pattern
wins. Its order is part of the behaviour: moving a rule changes which brand
overlapping formats resolve to (Nike shadows the Jordan prefixes, Adidas
shadows Reebok's two-letter format).
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from resolver.constants import UNKNOWN_BRAND
from resolver.models import Classification, ExtractedSku

BrandRule = Tuple[str, Sequence[Pattern[str]], float]


def _p(expr: str) -> Pattern[str]:
    return re.compile(expr, re.IGNORECASE)


BRAND_RULES: List[BrandRule] = [
    (
        "Nike",
        (
            _p(r"[A-Z]{2}[0-9]{4}-[0-9]{3}"),
            _p(r"[0-9]{6}-[0-9]{3}"),
            _p(r"[A-Z]{3}[0-9]{3}-[0-9]{3}"),
        ),
        0.95,
    ),
    (
        "Jordan",
        (_p(r"(CT|CZ|DM|DD|DC|DQ|DR|DO|DN|FQ|FD)[0-9]{4}-[0-9]{3}"),),
        0.90,
    ),
    (
        "Adidas",
        (
            _p(r"[A-Z]{2}[0-9]{4}"),
            _p(r"[A-Z][0-9]{5}"),
            _p(r"(GW|GX|GY|GZ|HP|HQ|HR|HS|HT|ID|IE|IF|IG|IH)[0-9]{4}"),
        ),
        0.90,
    ),
    (
        "New Balance",
        (
            _p(r"M[0-9]{3,4}[A-Z]{2,3}[0-9]?"),
            _p(r"W[0-9]{3,4}[A-Z]{2,3}[0-9]?"),
            _p(r"U[0-9]{3,4}[A-Z]{2,3}[0-9]?"),
            _p(r"ML[0-9]{3,4}[A-Z]{2,3}"),
        ),
        0.92,
    ),
    (
        "Puma",
        (
            _p(r"[0-9]{6}-[0-9]{2}"),
            _p(r"[0-9]{3}-[0-9]{5}"),
        ),
        0.88,
    ),
    (
        "Converse",
        (
            _p(r"[0-9]{6}C"),
            _p(r"[A-Z][0-9]{4,5}C"),
        ),
        0.90,
    ),
    (
        "Vans",
        (_p(r"VN0[A-Z][0-9A-Z]{5,7}"),),
        0.92,
    ),
    (
        "Asics",
        (
            _p(r"[0-9]{4}[A-Z][0-9]{3,4}(-[0-9]{3})?"),
            _p(r"1[0-9]{3}[A-Z][0-9]{3}-[0-9]{3}"),
        ),
        0.88,
    ),
    (
        "Reebok",
        (
            _p(r"[A-Z]{2}[0-9]{4}"),
            _p(r"[0-9]{2}-[0-9]{5}"),
        ),
        0.85,
    ),
]

# Anything that still looks like a product code
_GENERIC_CODE = _p(r"[A-Z0-9]{5,12}(-[A-Z0-9]{2,4})?")
GENERIC_CONFIDENCE = 0.5

_WHITESPACE = re.compile(r"\s+")
_NON_CODE_CHARS = re.compile(r"[^\w-]", re.ASCII)

# Extraction only keeps candidates that beat this
_MIN_EXTRACT_CONFIDENCE = 0.3

_SIZE_PATTERNS: List[Pattern[str]] = [
    _p(r"\bUS\s*[:#]?\s*(\d{1,2}(?:\.\d)?)\b"),
    _p(r"\b(\d{1,2}(?:\.\d)?)\s*US\b"),
    _p(r"\bSIZE\s*[:#]?\s*(\d{1,2}(?:\.\d)?)\b"),
]

BRAND_KEYWORDS: List[Tuple[str, Sequence[str]]] = [
    ("Nike", ("NIKE", "SWOOSH", "JUST DO IT")),
    ("Jordan", ("JORDAN", "AIR JORDAN", "JUMPMAN")),
    ("Adidas", ("ADIDAS", "THREE STRIPES", "TREFOIL")),
    ("New Balance", ("NEW BALANCE", "NB", "NEWBALANCE")),
    ("Puma", ("PUMA",)),
    ("Converse", ("CONVERSE", "CHUCK TAYLOR", "ALL STAR")),
    ("Vans", ("VANS", "OFF THE WALL")),
    ("Asics", ("ASICS", "GEL-")),
    ("Reebok", ("REEBOK",)),
]


def normalize_sku(raw: str) -> str:
    """Uppercase, trim and drop all whitespace. Idempotent."""
    if not isinstance(raw, str):
        return ""
    return _WHITESPACE.sub("", raw.upper().strip())


def classify_sku(raw: object) -> Classification:
    """Classify a raw query. Never raises; unusable input yields an empty classification."""
    if not raw or not isinstance(raw, str):
        return Classification()

    normalized = normalize_sku(raw)
    if not normalized:
        return Classification()

    for brand, patterns, confidence in BRAND_RULES:
        for pattern in patterns:
            if pattern.fullmatch(normalized):
                return Classification(brand=brand, confidence=confidence, normalized=normalized)

    if _GENERIC_CODE.fullmatch(normalized):
        return Classification(confidence=GENERIC_CONFIDENCE, normalized=normalized)

    return Classification(normalized=normalized)


def extract_skus_from_text(text: Optional[str]) -> List[ExtractedSku]:
    """Pull every identifier-looking token out of a text block, best first."""
    if not text:
        return []

    found: dict[str, ExtractedSku] = {}
    for token in _WHITESPACE.split(text.upper()):
        cleaned = _NON_CODE_CHARS.sub("", token.strip())
        if len(cleaned) < 5 or len(cleaned) > 15:
            continue

        classification = classify_sku(cleaned)
        if classification.confidence <= _MIN_EXTRACT_CONFIDENCE:
            continue
        if classification.normalized in found:
            continue
        found[classification.normalized] = ExtractedSku(
            sku=classification.normalized,
            brand=classification.brand,
            confidence=classification.confidence,
        )

    # sorted() is stable, so equal scores keep their order in the text
    return sorted(found.values(), key=lambda item: item.confidence, reverse=True)


def extract_us_size(text: Optional[str]) -> Optional[str]:
    """Return the first US shoe size mentioned in ``text`` ("US 10.5", "10 US", "SIZE: 9")."""
    if not text:
        return None
    for pattern in _SIZE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def detect_brand_from_text(text: Optional[str]) -> Optional[str]:
    """Guess a brand from keyword occurrence when no identifier pattern matched."""
    if not text:
        return None
    upper = text.upper()
    for brand, keywords in BRAND_KEYWORDS:
        if any(keyword in upper for keyword in keywords):
            return brand
    return None
