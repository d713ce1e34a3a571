"""Resolve routes - style code to product metadata."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dependencies import get_resolution_service
from resolver.service import ResolutionService

router = APIRouter(tags=["resolve"])


class ResolveRequest(BaseModel):
    query: str


@router.post("/resolve")
async def resolve_sku(
    request: ResolveRequest,
    service: ResolutionService = Depends(get_resolution_service),
):
    """
    Resolve a style code to brand, model, colorway and category.

    A miss is a 200 with success=false; malformed queries are a 400.
    """
    result = await service.resolve(request.query)
    return result.to_payload()


@router.get("/resolve/{sku}")
async def resolve_sku_path(
    sku: str,
    service: ResolutionService = Depends(get_resolution_service),
):
    """GET variant for quick lookups."""
    result = await service.resolve(sku)
    return result.to_payload()
