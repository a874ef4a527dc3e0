"""
Health check endpoint.
Verifies object storage connectivity.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from upload_gateway.storage.errors import UpstreamUnavailable
from upload_gateway.storage.r2_client import R2Client, get_r2_client

router = APIRouter()


@router.get("")
async def health_check(r2: R2Client = Depends(get_r2_client)):
    """
    Health check endpoint.
    Returns status of the storage bucket.
    """
    health_status = {
        "status": "healthy",
        "storage": "unknown"
    }

    try:
        await run_in_threadpool(r2.check_bucket)
        health_status["storage"] = "connected"
    except UpstreamUnavailable as e:
        health_status["storage"] = f"error: {e.reason.value}"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
