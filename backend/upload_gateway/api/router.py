"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from upload_gateway.api import health, uploads

api_router = APIRouter()

# Upload routes keep the original root paths used by existing clients
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(health.router, prefix="/api/health", tags=["health"])
