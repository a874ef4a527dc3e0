"""
Storage failure taxonomy.

Clients only ever see one failure kind (UpstreamUnavailable). The
StorageFailure tag is kept for logs and metrics so operators can tell
a bad manifest from an expired credential.
"""
from enum import Enum
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, PartialCredentialsError


class StorageFailure(str, Enum):
    """Why a store call failed."""
    AUTH_FAILURE = "auth_failure"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    NETWORK_FAULT = "network_fault"
    MANIFEST_MISMATCH = "manifest_mismatch"
    NOT_CONFIGURED = "not_configured"
    UNKNOWN = "unknown"


_AUTH_CODES = {
    "AccessDenied",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
    "InvalidToken",
    "AuthorizationHeaderMalformed",
}

_NOT_FOUND_CODES = {"NoSuchUpload", "NoSuchBucket", "NoSuchKey", "NotFound", "404"}

_RATE_LIMIT_CODES = {
    "SlowDown",
    "Throttling",
    "ThrottlingException",
    "TooManyRequests",
    "RequestLimitExceeded",
    "ServiceUnavailable",
}

_MANIFEST_CODES = {
    "InvalidPart",
    "InvalidPartOrder",
    "EntityTooSmall",
    "MalformedXML",
    "InvalidArgument",
}


class UpstreamUnavailable(Exception):
    """
    Raised when the object store rejects or fails a request.

    Attributes:
        operation: Store operation that failed (e.g. "complete_multipart_upload")
        reason: Tagged failure kind
        detail: Underlying error text, for logs only
    """

    def __init__(self, operation: str, reason: StorageFailure, detail: Optional[str] = None):
        self.operation = operation
        self.reason = reason
        self.detail = detail
        message = f"{operation} failed ({reason.value})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


def classify_client_error(error: ClientError) -> StorageFailure:
    """Map a botocore ClientError to a StorageFailure by error code, then HTTP status."""
    response = getattr(error, "response", None) or {}
    code = str(response.get("Error", {}).get("Code", ""))
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")

    if code in _AUTH_CODES:
        return StorageFailure.AUTH_FAILURE
    if code in _NOT_FOUND_CODES:
        return StorageFailure.NOT_FOUND
    if code in _RATE_LIMIT_CODES:
        return StorageFailure.RATE_LIMITED
    if code in _MANIFEST_CODES:
        return StorageFailure.MANIFEST_MISMATCH

    if status in (401, 403):
        return StorageFailure.AUTH_FAILURE
    if status == 404:
        return StorageFailure.NOT_FOUND
    if status in (429, 503):
        return StorageFailure.RATE_LIMITED
    return StorageFailure.UNKNOWN


def to_upstream_unavailable(operation: str, error: Exception) -> UpstreamUnavailable:
    """Wrap any boto3/botocore failure into UpstreamUnavailable."""
    if isinstance(error, ClientError):
        reason = classify_client_error(error)
    elif isinstance(error, (NoCredentialsError, PartialCredentialsError)):
        reason = StorageFailure.AUTH_FAILURE
    elif isinstance(error, BotoCoreError):
        reason = StorageFailure.NETWORK_FAULT
    else:
        reason = StorageFailure.UNKNOWN
    return UpstreamUnavailable(operation, reason, str(error))
