"""
Multipart upload session service.

Handles the business logic for large direct-to-storage uploads.

Flow:
1. Client initiates an upload with filename and content type
2. Backend derives the object key and opens a multipart upload in R2
3. Client requests a presigned URL per part and PUTs each part to R2
4. After an interruption, client lists committed parts and only re-sends missing ones
5. Client submits the part manifest and the backend asks R2 to complete

The backend holds no session state. R2 is the only record of which
uploads exist and which parts they contain.
"""
import logging
import time
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from upload_gateway.storage.errors import UpstreamUnavailable
from upload_gateway.storage.r2_client import R2Client
from upload_gateway.utils.logging import (
    log_part_url_issued,
    log_parts_listed,
    log_storage_failure,
    log_upload_completed,
    log_upload_initiated,
)
from upload_gateway.utils.metrics import (
    part_urls_issued_total,
    parts_listed_total,
    uploads_completed_total,
    uploads_initiated_total,
)

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads"


class MultipartUploadService:
    """
    Service for multipart upload sessions.

    Responsibilities:
    - Derive object keys
    - Open, list and complete multipart uploads in R2
    - Issue presigned part URLs
    """

    @staticmethod
    def generate_object_key(filename: str, timestamp_ms: Optional[int] = None) -> str:
        """
        Generate the object key for a new upload.

        Pattern: uploads/{epoch_ms}-{filename}

        Two uploads of the same filename within the same millisecond get the
        same key. Clients rely on this key shape, so it is kept as is.

        Args:
            filename: Client-supplied filename
            timestamp_ms: Creation time in epoch milliseconds (defaults to now)

        Returns:
            Object key string
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"{UPLOAD_PREFIX}/{timestamp_ms}-{filename}"

    @staticmethod
    async def initiate_upload(
        r2: R2Client,
        filename: str,
        content_type: Optional[str] = None
    ) -> tuple[str, str]:
        """
        Open a new multipart upload.

        Args:
            r2: Storage client
            filename: Client-supplied filename
            content_type: Declared MIME type, passed through to R2

        Returns:
            Tuple of (upload_id, object_key)

        Raises:
            UpstreamUnavailable: R2 rejected or failed the request
        """
        object_key = MultipartUploadService.generate_object_key(filename)
        start = time.perf_counter()

        try:
            upload_id = await run_in_threadpool(
                r2.create_multipart_upload, object_key, content_type
            )
        except UpstreamUnavailable as e:
            log_storage_failure(
                logger, e.operation, e.reason.value, e.detail or str(e), object_key=object_key
            )
            raise

        uploads_initiated_total.inc()
        log_upload_initiated(
            logger,
            upload_id=upload_id,
            object_key=object_key,
            duration_ms=(time.perf_counter() - start) * 1000,
            content_type=content_type,
        )
        return upload_id, object_key

    @staticmethod
    async def get_part_url(
        r2: R2Client,
        upload_id: str,
        object_key: str,
        part_number: int
    ) -> str:
        """
        Issue a presigned PUT URL for one part of an open upload.

        The upload is not checked for existence here; an unknown or finished
        upload makes the PUT fail at R2.

        Raises:
            UpstreamUnavailable: URL could not be signed
        """
        try:
            url = await run_in_threadpool(
                r2.generate_part_upload_url, object_key, upload_id, part_number
            )
        except UpstreamUnavailable as e:
            log_storage_failure(
                logger, e.operation, e.reason.value, e.detail or str(e),
                upload_id=upload_id, object_key=object_key, part_number=part_number
            )
            raise

        part_urls_issued_total.inc()
        log_part_url_issued(
            logger,
            upload_id=upload_id,
            object_key=object_key,
            part_number=part_number,
            expires_in=r2.part_url_expiration,
        )
        return url

    @staticmethod
    async def list_uploaded_parts(
        r2: R2Client,
        upload_id: str,
        object_key: str
    ) -> list[dict]:
        """
        List parts R2 has already committed for an upload.

        Used to resume: the client skips every part number present in the
        result. Parts are sorted by PartNumber so gaps can be found in one scan.

        Returns:
            List of {'PartNumber': int, 'ETag': str}, ascending

        Raises:
            UpstreamUnavailable: upload unknown/expired or listing failed
        """
        start = time.perf_counter()
        try:
            parts = await run_in_threadpool(r2.list_parts, object_key, upload_id)
        except UpstreamUnavailable as e:
            log_storage_failure(
                logger, e.operation, e.reason.value, e.detail or str(e),
                upload_id=upload_id, object_key=object_key
            )
            raise

        parts.sort(key=lambda part: part['PartNumber'])

        parts_listed_total.inc()
        log_parts_listed(
            logger,
            upload_id=upload_id,
            object_key=object_key,
            part_count=len(parts),
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return parts

    @staticmethod
    async def complete_upload(
        r2: R2Client,
        upload_id: str,
        object_key: str,
        parts: list[dict]
    ) -> None:
        """
        Complete a multipart upload from the client's part manifest.

        The manifest goes to R2 untouched. R2 accepts it only if it matches
        the committed parts exactly; otherwise the upload stays open.

        Args:
            r2: Storage client
            upload_id: Upload to complete
            object_key: Object key the upload is bound to
            parts: Ordered list of {'PartNumber': int, 'ETag': str}

        Raises:
            UpstreamUnavailable: R2 rejected the manifest or the request failed
        """
        start = time.perf_counter()
        try:
            await run_in_threadpool(r2.complete_multipart_upload, object_key, upload_id, parts)
        except UpstreamUnavailable as e:
            log_storage_failure(
                logger, e.operation, e.reason.value, e.detail or str(e),
                upload_id=upload_id, object_key=object_key, part_count=len(parts)
            )
            raise

        uploads_completed_total.inc()
        log_upload_completed(
            logger,
            upload_id=upload_id,
            object_key=object_key,
            part_count=len(parts),
            duration_ms=(time.perf_counter() - start) * 1000,
        )
