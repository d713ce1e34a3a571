"""
Shared FastAPI dependencies.

The resolution service is built once at startup and parked on app.state;
routes receive it through get_resolution_service.
"""

from fastapi import HTTPException, Request

from resolver.service import ResolutionService


def get_resolution_service(request: Request) -> ResolutionService:
    service = getattr(request.app.state, "resolution_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Resolution service not ready")
    return service
