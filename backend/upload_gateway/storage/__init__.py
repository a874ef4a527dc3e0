"""
Storage module for S3-compatible object storage (Cloudflare R2).

This module handles multipart uploads from browser and mobile clients.
The backend NEVER receives file bytes - parts go directly to R2.
"""
from upload_gateway.storage.r2_client import get_r2_client, R2Client
from upload_gateway.storage.multipart import MultipartUploadService
from upload_gateway.storage.errors import StorageFailure, UpstreamUnavailable

__all__ = [
    "get_r2_client",
    "R2Client",
    "MultipartUploadService",
    "StorageFailure",
    "UpstreamUnavailable",
]
