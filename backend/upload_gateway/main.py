"""
FastAPI application entry point.
Sets up the API with lifespan events for logging and storage checks.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from upload_gateway import __version__
from upload_gateway.config import settings
from upload_gateway.api.router import api_router
from upload_gateway.middleware.metrics_middleware import MetricsMiddleware
from upload_gateway.storage.errors import UpstreamUnavailable
from upload_gateway.utils.logging import configure_logging

logger = logging.getLogger(__name__)

# Client-facing message per storage operation
FAILURE_MESSAGES = {
    "create_multipart_upload": "Failed to initiate upload",
    "generate_part_upload_url": "Failed to get part URL",
    "list_parts": "Failed to list parts",
    "complete_multipart_upload": "Failed to complete upload",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure logging, optionally require storage settings
    - Shutdown: Nothing to release (no state is held)
    """
    configure_logging('upload-gateway', settings.log_level)

    missing = settings.missing_storage_settings
    if missing:
        # Lazy by default: requests fail with 502 until settings are provided
        if settings.strict_storage_config:
            raise RuntimeError(f"Missing storage settings: {', '.join(missing)}")
        logger.warning(f"Storage settings missing, uploads will fail: {', '.join(missing)}")

    yield


# Create FastAPI app
app = FastAPI(
    title="Upload Gateway",
    description="Resumable multipart uploads straight to S3-compatible storage",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware (browser clients upload from other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)

app.include_router(api_router)


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    """Collapse every storage failure into one 502 response shape."""
    logger.debug(
        f"Upstream failure on {request.url.path}: {exc}",
        extra={"event": "upstream_unavailable", "operation": exc.operation, "reason": exc.reason.value}
    )
    return JSONResponse(
        status_code=502,
        content={"error": FAILURE_MESSAGES.get(exc.operation, "Storage request failed")}
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Upload Gateway",
        "version": __version__,
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def run():
    """Run the API with uvicorn using HOST/PORT settings."""
    uvicorn.run(app, host=settings.host, port=settings.port)
