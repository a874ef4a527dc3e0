"""
Cloudflare R2 / S3-compatible storage client.

Uses boto3 with S3-compatible API to interact with Cloudflare R2.
This is storage-provider agnostic - works with any S3-compatible storage.

The client only talks multipart: create an upload, presign individual
part PUTs, list committed parts and complete the upload. Part bytes
never pass through this process.
"""
import logging
import time
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from upload_gateway.config import Settings, settings as default_settings
from upload_gateway.storage.errors import StorageFailure, UpstreamUnavailable, to_upstream_unavailable
from upload_gateway.utils.metrics import storage_failures_total, storage_request_duration_seconds

logger = logging.getLogger(__name__)


class R2Client:
    """
    S3-compatible client for Cloudflare R2.

    Wraps a boto3 S3 client. Every failure is raised as UpstreamUnavailable
    with a StorageFailure tag; nothing is retried.
    """

    def __init__(self, config: Optional[Settings] = None, client: Any = None):
        """
        Initialize R2 client.

        Args:
            config: Settings to read endpoint, credentials and bucket from
            client: Pre-built boto3-compatible S3 client (tests inject fakes here)

        Missing settings do not raise here. The client stays unconfigured
        and each operation raises UpstreamUnavailable(NOT_CONFIGURED).
        """
        self._settings = config or default_settings
        self._client = client

        if self._client is not None:
            return

        missing = self._settings.missing_storage_settings
        if missing:
            logger.warning(
                f"R2 storage not configured. Set {', '.join(missing)}."
            )
            return

        # Single attempt per call: completion must not be re-sent behind the caller's back
        self._client = boto3.client(
            's3',
            endpoint_url=self._settings.r2_endpoint,
            aws_access_key_id=self._settings.r2_access_key,
            aws_secret_access_key=self._settings.r2_secret_key,
            region_name=self._settings.r2_region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'},  # R2 uses path-style
                retries={'mode': 'standard', 'total_max_attempts': 1},
            )
        )
        logger.info(f"R2 client initialized for bucket: {self._settings.r2_bucket}")

    @property
    def is_configured(self) -> bool:
        """Check if R2 client is properly configured."""
        return self._client is not None and bool(self._settings.r2_bucket)

    @property
    def bucket(self) -> Optional[str]:
        """Get configured bucket name."""
        return self._settings.r2_bucket

    @property
    def part_url_expiration(self) -> int:
        return self._settings.part_url_expiration

    def _call(self, operation: str, method: str, **params) -> Any:
        """Invoke one client method, timing it and translating failures."""
        if not self.is_configured:
            storage_failures_total.labels(
                operation=operation, reason=StorageFailure.NOT_CONFIGURED.value
            ).inc()
            raise UpstreamUnavailable(
                operation, StorageFailure.NOT_CONFIGURED, "storage settings are missing"
            )

        start = time.perf_counter()
        try:
            return getattr(self._client, method)(**params)
        except (ClientError, BotoCoreError) as e:
            error = to_upstream_unavailable(operation, e)
            storage_failures_total.labels(operation=operation, reason=error.reason.value).inc()
            raise error from e
        finally:
            storage_request_duration_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )

    def create_multipart_upload(self, object_key: str, content_type: Optional[str] = None) -> str:
        """
        Open a multipart upload.

        Args:
            object_key: Key the assembled object will be stored under
            content_type: MIME type recorded on the final object, if given

        Returns:
            Store-assigned UploadId
        """
        params = {'Bucket': self.bucket, 'Key': object_key}
        if content_type is not None:
            params['ContentType'] = content_type

        response = self._call('create_multipart_upload', 'create_multipart_upload', **params)
        return response['UploadId']

    def generate_part_upload_url(
        self,
        object_key: str,
        upload_id: str,
        part_number: int,
        expiration: Optional[int] = None
    ) -> str:
        """
        Generate a presigned PUT URL for one part.

        The signature covers bucket, key, uploadId and partNumber, so the URL
        cannot be replayed for a different part or upload. Expiry is enforced
        by the store.
        """
        if expiration is None:
            expiration = self.part_url_expiration

        url = self._call(
            'generate_part_upload_url',
            'generate_presigned_url',
            ClientMethod='upload_part',
            Params={
                'Bucket': self.bucket,
                'Key': object_key,
                'UploadId': upload_id,
                'PartNumber': part_number,
            },
            ExpiresIn=expiration
        )

        logger.debug(f"Generated part URL for {object_key} part {part_number}")
        return url

    def list_parts(self, object_key: str, upload_id: str) -> list[dict]:
        """
        List every part the store has committed for an upload.

        Follows PartNumberMarker pagination until the listing is no longer
        truncated. Parts are returned in the store's order.

        Returns:
            List of {'PartNumber': int, 'ETag': str}
        """
        parts: list[dict] = []
        params = {'Bucket': self.bucket, 'Key': object_key, 'UploadId': upload_id}

        while True:
            response = self._call('list_parts', 'list_parts', **params)
            for part in response.get('Parts', []):
                parts.append({'PartNumber': part['PartNumber'], 'ETag': part['ETag']})

            marker = response.get('NextPartNumberMarker')
            if not response.get('IsTruncated') or not marker:
                break
            params['PartNumberMarker'] = marker

        return parts

    def complete_multipart_upload(self, object_key: str, upload_id: str, parts: list[dict]) -> None:
        """
        Assemble the committed parts into the final object.

        The manifest is sent exactly as given. The store rejects it unless it
        names every committed part with the right ETag in ascending order.
        """
        self._call(
            'complete_multipart_upload',
            'complete_multipart_upload',
            Bucket=self.bucket,
            Key=object_key,
            UploadId=upload_id,
            MultipartUpload={'Parts': parts}
        )

    def check_bucket(self) -> None:
        """Probe the bucket with HeadBucket. Raises UpstreamUnavailable on failure."""
        self._call('head_bucket', 'head_bucket', Bucket=self.bucket)


# Singleton instance
_r2_client: Optional[R2Client] = None


def get_r2_client() -> R2Client:
    """
    Get the singleton R2 client instance.

    Returns:
        R2Client instance (may or may not be configured)
    """
    global _r2_client
    if _r2_client is None:
        _r2_client = R2Client()
    return _r2_client
