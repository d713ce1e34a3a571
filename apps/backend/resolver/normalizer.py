"""Fills brand/model/colorway gaps from a source's free-text display name.

Every table here is first-match-wins; keep the more specific entries above
the looser ones they overlap with.
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from resolver.constants import DEFAULT_CATEGORY
from resolver.models import NormalizedRecord, SourceResult

BRAND_NAME_PATTERNS: List[Tuple[str, Sequence[str]]] = [
    ("Jordan", ("AIR JORDAN", "JORDAN")),
    ("Nike", ("NIKE", "DUNK", "AIR FORCE", "AIR MAX", "BLAZER", "CORTEZ")),
    ("Adidas", ("ADIDAS", "YEEZY", "ULTRABOOST", "NMD", "SUPERSTAR", "STAN SMITH")),
    ("New Balance", ("NEW BALANCE", "NB ")),
    ("Puma", ("PUMA",)),
    ("Converse", ("CONVERSE", "CHUCK TAYLOR", "ALL STAR")),
    ("Vans", ("VANS", "OLD SKOOL", "SK8-HI", "AUTHENTIC")),
    ("Asics", ("ASICS", "GEL-LYTE", "GEL-KAYANO")),
    ("Reebok", ("REEBOK", "CLUB C", "CLASSIC LEATHER")),
]


def _p(expr: str) -> Pattern[str]:
    return re.compile(expr, re.IGNORECASE)


# (pattern, brand the model line belongs to)
MODEL_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (_p(r"\b(Air Jordan \d+)\b"), "Jordan"),
    (_p(r"\b(Jordan \d+(?: Retro)?)\b"), "Jordan"),
    (_p(r"\b(Dunk (?:Low|High|Mid))\b"), "Nike"),
    (_p(r"\b(Air Force 1(?: Low| High| Mid| '07)?)\b"), "Nike"),
    (_p(r"\b(Air Max \d+)\b"), "Nike"),
    (_p(r"\b(Blazer (?:Low|Mid|High))\b"), "Nike"),
    (_p(r"\b(Cortez)\b"), "Nike"),
    (_p(r"\b(Yeezy (?:Boost )?\d+(?:\s*V\d)?)\b"), "Adidas"),
    (_p(r"\b(Ultra ?Boost(?:\s*\d+)?)\b"), "Adidas"),
    (_p(r"\b(NMD[_ ]?R?\d?)\b"), "Adidas"),
    (_p(r"\b(Superstar)\b"), "Adidas"),
    (_p(r"\b(Stan Smith)\b"), "Adidas"),
    (_p(r"\b(Forum (?:Low|High|Mid))\b"), "Adidas"),
    (_p(r"\b(\d{3,4}(?:v\d)?)\b"), "New Balance"),
    (_p(r"\b(Chuck Taylor|Chuck 70|All Star)\b"), "Converse"),
    (_p(r"\b(Old Skool|Sk8-Hi|Authentic|Era|Slip-On)\b"), "Vans"),
    (_p(r"\b(Gel-Lyte(?:\s*[IVX]+)?)\b"), "Asics"),
    (_p(r"\b(Gel-Kayano(?:\s*\d+)?)\b"), "Asics"),
]

_QUOTED = re.compile(r"['\"]([^'\"]+)['\"]")
# "Jordan 4 Retro White Oreo (2021)" -> "White Oreo"
_AFTER_RETRO = _p(r"Retro\s+['\"]?([^'\"(]+?)['\"]?\s*(?:\(\d{4}\)|\d{4})?$")
_PARENTHESIZED = re.compile(r"\(([^)]+)\)")
_YEAR = re.compile(r"\d{4}")

KNOWN_COLORWAYS: List[str] = [
    "Panda", "Bred", "Chicago", "Royal", "Shadow", "Pine Green",
    "University Blue", "Fire Red", "Cement", "Infrared", "Concord",
    "White Oreo", "Black Cat", "Cool Grey", "Triple White", "Triple Black",
    "Zebra", "Beluga", "Cream", "Butter", "Static", "Bone",
    "Grey Day", "Sea Salt", "Navy", "Burgundy", "Forest Green",
]


def extract_brand(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    upper = name.upper()
    for brand, keywords in BRAND_NAME_PATTERNS:
        if any(keyword in upper for keyword in keywords):
            return brand
    return None


def extract_model(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    for pattern, _brand in MODEL_PATTERNS:
        match = pattern.search(name)
        if match:
            return match.group(1)
    return None


def extract_colorway(name: Optional[str]) -> Optional[str]:
    """Colorway precedence: quoted text, text after "Retro", parenthesised text, known names."""
    if not name:
        return None

    # "Panda" style nickname
    match = _QUOTED.search(name)
    if match:
        return match.group(1)

    # Jordan 1 Retro High OG Chicago (2015)
    match = _AFTER_RETRO.search(name)
    if match:
        return match.group(1).strip()

    # A bare year in parentheses is a release date, not a colorway
    match = _PARENTHESIZED.search(name)
    if match and not _YEAR.fullmatch(match.group(1)):
        return match.group(1)

    # Last resort: known colorway names anywhere in the title
    upper = name.upper()
    for colorway in KNOWN_COLORWAYS:
        if colorway.upper() in upper:
            return colorway

    return None


def normalize_result(result: Optional[SourceResult]) -> NormalizedRecord:
    """Turn a source candidate into a NormalizedRecord.

    Structured fields supplied by the source are kept verbatim; gaps are filled
    from the display name. Never raises.
    """
    if result is None:
        return NormalizedRecord()

    name = result.name or ""
    return NormalizedRecord(
        brand=result.brand or extract_brand(name),
        name=name or None,
        model=result.model or extract_model(name),
        colorway=result.colorway or extract_colorway(name),
        category=result.category or DEFAULT_CATEGORY,
    )


def clean_name(name: Optional[str]) -> str:
    """Collapse whitespace and drop a parenthesised release year."""
    if not name:
        return ""
    collapsed = re.sub(r"\s+", " ", name)
    return re.sub(r"\(\d{4}\)", "", collapsed, count=1).strip()
