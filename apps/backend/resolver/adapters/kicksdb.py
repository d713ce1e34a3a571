"""KicksDB adapter: paid unified catalogue API (StockX, GOAT, Flight Club).

Required env vars:
  KICKSDB_API_KEY - bearer token; without it the adapter is not registered
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from exceptions import SourceAdapterError
from resolver.adapters.base import SourceAdapter, clean_text, pick_best_candidate
from resolver.models import SourceResult
from utils.security import redact_secrets_from_text, redact_sensitive

logger = logging.getLogger(__name__)

_PRODUCTS_URL = "https://api.kicks.dev/v3/stockx/products"


class KicksDBAdapter(SourceAdapter):
    """KicksDB product search, queried by style code."""

    adapter_id = "kicksdb"

    def __init__(self, api_key: str, base_url: str = _PRODUCTS_URL, timeout: float = 10.0):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    async def lookup(self, sku: str) -> Optional[SourceResult]:
        if not self.api_key:
            logger.warning("[KicksDBAdapter] API key not configured")
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(
                    self.base_url,
                    params={"query": sku},
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Accept": "application/json",
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            # Bad credentials are a configuration fault, not a miss
            if status_code in (401, 403):
                raise SourceAdapterError(
                    f"KicksDB rejected the API key (HTTP {status_code})",
                    adapter=self.adapter_id,
                ) from e
            logger.error(f"[KicksDBAdapter] HTTP {status_code} for {sku}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[KicksDBAdapter] Lookup failed for {sku}: {redact_secrets_from_text(str(e))}")
            return None

        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, list) or not items:
            logger.info(f"[KicksDBAdapter] No products for {sku}")
            return None

        # Prefer the product whose style code matches exactly
        item, exact = pick_best_candidate(items, sku, "sku")
        if item is None:
            return None

        logger.info(f"[KicksDBAdapter] Got {len(items)} products for {sku} (exact={exact})")
        return self._to_result(item, sku, exact)

    def _to_result(self, item: Dict[str, Any], sku: str, exact: bool) -> SourceResult:
        categories = item.get("categories")
        category = None
        if isinstance(categories, list) and categories:
            category = clean_text(categories[0])

        # Title is the display name; older payloads only carry name
        return SourceResult(
            brand=clean_text(item.get("brand")),
            name=clean_text(item.get("title")) or clean_text(item.get("name")),
            model=clean_text(item.get("model")),
            colorway=clean_text(item.get("colorway")),
            category=category,
            returned_id=clean_text(item.get("sku")) or sku,
            source_name=self.adapter_id,
            exact_match=exact,
            raw_payload=redact_sensitive(item),
        )
