"""
Upload endpoints for multipart direct-to-storage uploads.

Implements the resumable upload flow:
1. POST /initiate-upload - Open a multipart upload, get uploadId and key
2. POST /get-part-url - Get presigned URL for one part
3. POST /list-uploaded-parts - List parts R2 already has (resume)
4. POST /complete-upload - Assemble the parts into the final object

Why this approach?
- Backend never handles file bytes (no bandwidth/memory issues)
- Parts go directly from the client to R2 storage
- Interrupted uploads resume from whatever R2 already committed
- Bucket stays private - only presigned URLs can write to it

Storage failures raise UpstreamUnavailable, which the app-level handler
turns into a 502 with a per-operation message.
"""
from fastapi import APIRouter, Depends

from upload_gateway.schemas.upload import (
    CompleteUploadRequest,
    CompleteUploadResponse,
    ErrorResponse,
    InitiateUploadRequest,
    InitiateUploadResponse,
    ListPartsRequest,
    ListPartsResponse,
    PartUrlRequest,
    PartUrlResponse,
)
from upload_gateway.storage.multipart import MultipartUploadService
from upload_gateway.storage.r2_client import R2Client, get_r2_client

router = APIRouter(responses={502: {"model": ErrorResponse}})


@router.post("/initiate-upload", response_model=InitiateUploadResponse)
async def initiate_upload(
    request: InitiateUploadRequest,
    r2: R2Client = Depends(get_r2_client)
):
    """
    Open a multipart upload in R2.

    The object key is uploads/<epoch_ms>-<filename>. Keep both the
    uploadId and key: every later call needs them.
    """
    upload_id, object_key = await MultipartUploadService.initiate_upload(
        r2,
        filename=request.filename,
        content_type=request.content_type
    )
    return InitiateUploadResponse(upload_id=upload_id, key=object_key)


@router.post("/get-part-url", response_model=PartUrlResponse)
async def get_part_url(
    request: PartUrlRequest,
    r2: R2Client = Depends(get_r2_client)
):
    """
    Get a presigned PUT URL for one part.

    The URL is only valid for this uploadId and partNumber and expires
    after five minutes. The ETag header of the PUT response must be kept
    for /complete-upload.
    """
    url = await MultipartUploadService.get_part_url(
        r2,
        upload_id=request.upload_id,
        object_key=request.key,
        part_number=request.part_number
    )
    return PartUrlResponse(url=url, expires_in=r2.part_url_expiration)


@router.post("/list-uploaded-parts", response_model=ListPartsResponse)
async def list_uploaded_parts(
    request: ListPartsRequest,
    r2: R2Client = Depends(get_r2_client)
):
    """
    List the parts R2 has already committed, ascending by part number.

    Clients call this after an interruption and only request URLs for
    part numbers missing from the result.
    """
    parts = await MultipartUploadService.list_uploaded_parts(
        r2,
        upload_id=request.upload_id,
        object_key=request.key
    )
    return ListPartsResponse(uploaded_parts=parts)


@router.post("/complete-upload", response_model=CompleteUploadResponse)
async def complete_upload(
    request: CompleteUploadRequest,
    r2: R2Client = Depends(get_r2_client)
):
    """
    Complete the upload.

    parts must list every uploaded part with its ETag in ascending order.
    Any mismatch fails the whole call and the upload stays open.
    """
    await MultipartUploadService.complete_upload(
        r2,
        upload_id=request.upload_id,
        object_key=request.key,
        parts=[part.to_storage() for part in request.parts]
    )
    return CompleteUploadResponse(success=True)
