"""Scan routes - identifiers already read off a shoe-box tag by OCR."""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dependencies import get_resolution_service
from resolver.service import ResolutionService

router = APIRouter(tags=["scan"])


class ScanRequest(BaseModel):
    sku: str
    us_size: Optional[str] = None
    brand_hint: Optional[str] = None
    raw_text: Optional[str] = None


class ScanTextRequest(BaseModel):
    text: str


@router.post("/scan")
async def scan_sku(
    request: ScanRequest,
    service: ResolutionService = Depends(get_resolution_service),
):
    result = await service.resolve_scan(
        request.sku,
        us_size=request.us_size,
        brand_hint=request.brand_hint,
        raw_text=request.raw_text,
    )
    return result.to_payload()


@router.post("/scan/text")
async def scan_text(
    request: ScanTextRequest,
    service: ResolutionService = Depends(get_resolution_service),
):
    """
    Extract the most likely style code from OCR text, then resolve it.

    Size and brand hints found in the text are echoed back.
    """
    result = await service.resolve_text(request.text)
    return result.to_payload()
