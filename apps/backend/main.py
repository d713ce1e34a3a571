"""
SKU Resolver backend.

FastAPI app wiring the resolution pipeline to HTTP, with health checks,
Prometheus metrics and CORS.
"""
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from exceptions import ResolverError
from observability.health import run_health_checks
from observability.logging import get_logger, setup_logging
from observability.metrics import metrics_registry
from observability.middleware import ObservabilityMiddleware
from resolver.adapters import build_default_adapters
from resolver.cache import create_cache_store
from resolver.service import ResolutionService
from routes.resolve import router as resolve_router
from routes.scan import router as scan_router

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

setup_logging()
logger = get_logger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the cache store and adapter chain once per process."""
    logger.info(f"SKU resolver starting (environment: {os.getenv('ENVIRONMENT', 'development')})")

    cache = create_cache_store()
    if hasattr(cache, "init_schema"):
        await cache.init_schema()
    app.state.resolution_service = ResolutionService(cache, build_default_adapters())
    logger.info(f"Cache backend: {cache.backend_name}")

    try:
        yield
    finally:
        await cache.close()
        app.state.resolution_service = None
        logger.info("SKU resolver shutting down")


app = FastAPI(
    title="SKU Resolver Backend",
    description="Resolves sneaker style codes to brand, model and colorway",
    version=VERSION,
    lifespan=lifespan,
)
app.state.resolution_service = None

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resolve_router)
app.include_router(scan_router)


class HealthResponse(BaseModel):
    status: str
    version: str


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {
        "status": "healthy",
        "version": VERSION,
    }


@app.get("/health/ready")
async def readiness_check(request: Request):
    """
    Readiness check - verifies the cache store answers.

    Returns 503 if the service has not started or the cache is unavailable.
    """
    service = getattr(request.app.state, "resolution_service", None)
    if service is None:
        return JSONResponse(
            status_code=503,
            content={
                "status": "starting",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    report = await run_health_checks(service.cache, service.adapters)
    return JSONResponse(
        status_code=503 if report["status"] == "unhealthy" else 200,
        content=report,
    )


@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(ResolverError)
async def resolver_exception_handler(request: Request, exc: ResolverError):
    if exc.status_code >= 500:
        logger.error(
            f"[{type(exc).__name__}] {exc.message}",
            extra={"path": str(request.url.path), "detail": exc.detail},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies share the 400 shape used for rejected queries."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    # Drop the leading "body" segment from the location
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
    message = f"Invalid request: {field} - {first.get('msg', 'invalid value')}"
    logger.info(message, extra={"path": str(request.url.path)})
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log the full traceback server-side; return a generic message to the client."""
    error_id = f"ERR-{datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')}-{id(exc)}"
    logger.error(
        f"[ERROR {error_id}] Unhandled exception",
        extra={
            "error_id": error_id,
            "error_type": type(exc).__name__,
            "path": str(request.url.path),
            "method": request.method,
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Resolution failed", "error_id": error_id},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
