"""
Pydantic schemas for API request/response validation.
"""
from upload_gateway.schemas.upload import (
    UploadedPart,
    InitiateUploadRequest,
    InitiateUploadResponse,
    PartUrlRequest,
    PartUrlResponse,
    ListPartsRequest,
    ListPartsResponse,
    CompleteUploadRequest,
    CompleteUploadResponse,
    ErrorResponse,
)

__all__ = [
    "UploadedPart",
    "InitiateUploadRequest",
    "InitiateUploadResponse",
    "PartUrlRequest",
    "PartUrlResponse",
    "ListPartsRequest",
    "ListPartsResponse",
    "CompleteUploadRequest",
    "CompleteUploadResponse",
    "ErrorResponse",
]
