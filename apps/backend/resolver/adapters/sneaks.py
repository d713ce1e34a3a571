"""Sneaks adapter: free fallback backed by a sneaks-api server's JSON endpoints.

Optional env vars:
  SNEAKS_API_URL  - server base URL (default http://localhost:4000)
  SNEAKS_ENABLED  - set to "false" to drop the adapter from the chain

Looks the style code up directly first, then falls back to a keyword search.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from resolver.adapters.base import SourceAdapter, clean_text, pick_best_candidate
from resolver.models import SourceResult
from utils.security import redact_secrets_from_text

logger = logging.getLogger(__name__)

DEFAULT_SNEAKS_URL = "http://localhost:4000"

_RAW_FIELDS = ("retailPrice", "releaseDate", "thumbnail", "resellLinks", "lowestResellPrice")


class SneaksAdapter(SourceAdapter):
    adapter_id = "sneaks"

    def __init__(self, base_url: str = DEFAULT_SNEAKS_URL, search_limit: int = 5, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.search_limit = search_limit
        self.timeout = timeout

    async def lookup(self, sku: str) -> Optional[SourceResult]:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
                # Direct style lookup first, search only on a miss
                product = await self._get_by_style_id(client, sku)
                if product is not None:
                    style_id = clean_text(product.get("styleID"))
                    # The prices endpoint may omit styleID; the path already pinned it
                    exact = style_id is None or style_id.upper() == sku.upper()
                    return self._to_result(product, sku, exact)

                products = await self._search(client, sku)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[SneaksAdapter] Lookup failed for {sku}: {redact_secrets_from_text(str(e))}")
            return None

        product, exact = pick_best_candidate(products, sku, "styleID")
        if product is None:
            logger.info(f"[SneaksAdapter] No products for {sku}")
            return None
        return self._to_result(product, sku, exact)

    async def _get_by_style_id(self, client: httpx.AsyncClient, sku: str) -> Optional[Dict[str, Any]]:
        try:
            resp = await client.get(f"/id/{quote(sku, safe='')}/prices")
            resp.raise_for_status()
            product = resp.json()
        # 404 and friends fall through to search
        except httpx.HTTPStatusError as e:
            logger.debug(f"[SneaksAdapter] Style lookup HTTP {e.response.status_code} for {sku}, searching")
            return None

        # An empty object means the server found nothing
        if not isinstance(product, dict) or not (product.get("shoeName") or product.get("styleID")):
            return None
        return product

    async def _search(self, client: httpx.AsyncClient, sku: str) -> List[Dict[str, Any]]:
        resp = await client.get(
            f"/search/{quote(sku, safe='')}",
            params={"count": self.search_limit},
        )
        resp.raise_for_status()
        products = resp.json()
        if not isinstance(products, list):
            return []
        return products

    def _to_result(self, product: Dict[str, Any], sku: str, exact: bool) -> SourceResult:
        return SourceResult(
            brand=clean_text(product.get("brand")),
            name=clean_text(product.get("shoeName")) or clean_text(product.get("name")),
            colorway=clean_text(product.get("colorway")),
            returned_id=clean_text(product.get("styleID")) or sku,
            source_name=self.adapter_id,
            exact_match=exact,
            # Keep only price and link fields; the full payload is large
            raw_payload={field: product.get(field) for field in _RAW_FIELDS if field in product},
        )
