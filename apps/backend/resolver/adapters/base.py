"""Source adapter interface and shared candidate-selection helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Tuple

from resolver.models import SourceResult


def clean_text(value: Any) -> Optional[str]:
    """Strip a payload string; empty or non-string values become None."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def pick_best_candidate(
    items: Sequence[Dict[str, Any]], sku: str, id_field: str
) -> Tuple[Optional[Dict[str, Any]], bool]:
    """Prefer the item whose identifier equals ``sku`` case-insensitively, else the first.

    Returns (item, exact_match).
    """
    candidates = [item for item in items if isinstance(item, dict)]
    if not candidates:
        return None, False

    wanted = sku.strip().upper()
    for item in candidates:
        identifier = clean_text(item.get(id_field))
        if identifier and identifier.upper() == wanted:
            return item, True
    return candidates[0], False


class SourceAdapter(ABC):
    """One upstream data source.

    ``lookup`` returns the single best candidate or None. Implementations
    should catch their own failures; the execution wrapper catches whatever
    slips through, so nothing an adapter raises reaches the caller.
    """

    adapter_id: str = "unknown"

    @abstractmethod
    async def lookup(self, sku: str) -> Optional[SourceResult]:
        pass
