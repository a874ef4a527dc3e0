"""
Test configuration and fixtures.
Uses an in-memory S3 stand-in so no object store is needed.
"""
import hashlib
import os
import uuid as uuid_module

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"

import pytest
from typing import AsyncGenerator, Optional

from botocore.exceptions import ClientError
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from upload_gateway.config import Settings
from upload_gateway.storage.r2_client import R2Client


TEST_BUCKET = "test-bucket"


def make_client_error(code: str, status: int, operation: str, message: str = "") -> ClientError:
    """Build a botocore ClientError shaped like a real S3 error response."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": message or code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeS3Client:
    """
    In-memory stand-in for a boto3 S3 client.

    Implements only the multipart calls the gateway makes, with S3's
    request/response shapes and error codes.
    """

    def __init__(self, page_size: int = 1000):
        self.page_size = page_size
        self.uploads: dict[str, dict] = {}
        self.objects: dict[str, dict] = {}
        self.calls: list[str] = []
        self.fail_next: dict[str, ClientError] = {}

    def _maybe_fail(self, method: str):
        self.calls.append(method)
        error = self.fail_next.pop(method, None)
        if error is not None:
            raise error

    def _get_upload(self, key: str, upload_id: str, operation: str) -> dict:
        upload = self.uploads.get(upload_id)
        if upload is None or upload["key"] != key:
            raise make_client_error("NoSuchUpload", 404, operation)
        return upload

    def create_multipart_upload(self, Bucket: str, Key: str, ContentType: Optional[str] = None):
        self._maybe_fail("create_multipart_upload")
        upload_id = uuid_module.uuid4().hex
        self.uploads[upload_id] = {"key": Key, "content_type": ContentType, "parts": {}}
        return {"Bucket": Bucket, "Key": Key, "UploadId": upload_id}

    def generate_presigned_url(self, ClientMethod: str, Params: dict, ExpiresIn: int):
        self._maybe_fail("generate_presigned_url")
        # Same inputs give the same URL, as SigV4 does within one signing second
        signed = f"{Params['Bucket']}/{Params['Key']}/{Params['UploadId']}/{Params['PartNumber']}/{ExpiresIn}"
        signature = hashlib.sha256(signed.encode()).hexdigest()
        return (
            f"https://r2.test/{Params['Bucket']}/{Params['Key']}"
            f"?partNumber={Params['PartNumber']}&uploadId={Params['UploadId']}"
            f"&X-Amz-Expires={ExpiresIn}&X-Amz-Signature={signature}"
        )

    def put_part(self, key: str, upload_id: str, part_number: int, body: bytes) -> str:
        """Simulate the client's direct PUT of one part; returns the ETag."""
        upload = self._get_upload(key, upload_id, "UploadPart")
        etag = f'"{hashlib.md5(body).hexdigest()}"'
        upload["parts"][part_number] = etag
        return etag

    def list_parts(self, Bucket: str, Key: str, UploadId: str, PartNumberMarker: int = 0):
        self._maybe_fail("list_parts")
        upload = self._get_upload(Key, UploadId, "ListParts")
        numbers = sorted(n for n in upload["parts"] if n > int(PartNumberMarker))
        page = numbers[:self.page_size]
        truncated = len(numbers) > self.page_size
        response = {
            "Bucket": Bucket,
            "Key": Key,
            "UploadId": UploadId,
            "IsTruncated": truncated,
            "Parts": [{"PartNumber": n, "ETag": upload["parts"][n], "Size": 5} for n in page],
        }
        if truncated:
            response["NextPartNumberMarker"] = page[-1]
        return response

    def complete_multipart_upload(self, Bucket: str, Key: str, UploadId: str, MultipartUpload: dict):
        self._maybe_fail("complete_multipart_upload")
        upload = self._get_upload(Key, UploadId, "CompleteMultipartUpload")
        manifest = MultipartUpload.get("Parts", [])
        if not manifest:
            raise make_client_error("MalformedXML", 400, "CompleteMultipartUpload")

        numbers = [part["PartNumber"] for part in manifest]
        if numbers != sorted(numbers) or len(set(numbers)) != len(numbers):
            raise make_client_error("InvalidPartOrder", 400, "CompleteMultipartUpload")

        committed = sorted(upload["parts"].items())
        supplied = [(part["PartNumber"], part["ETag"]) for part in manifest]
        if supplied != committed:
            raise make_client_error("InvalidPart", 400, "CompleteMultipartUpload")

        self.objects[Key] = {"parts": supplied, "content_type": upload["content_type"]}
        del self.uploads[UploadId]
        return {"Bucket": Bucket, "Key": Key, "ETag": '"assembled"'}

    def head_bucket(self, Bucket: str):
        self._maybe_fail("head_bucket")
        if Bucket != TEST_BUCKET:
            raise make_client_error("404", 404, "HeadBucket")
        return {}


def make_settings(**overrides) -> Settings:
    values = {
        "r2_endpoint": "https://account.r2.cloudflarestorage.com",
        "r2_access_key": "test-access-key",
        "r2_secret_key": "test-secret-key",
        "r2_bucket": TEST_BUCKET,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fake_s3() -> FakeS3Client:
    """Fresh in-memory store per test."""
    return FakeS3Client()


@pytest.fixture
def r2(fake_s3: FakeS3Client) -> R2Client:
    """R2Client wired to the in-memory store."""
    return R2Client(config=make_settings(), client=fake_s3)


@pytest.fixture
def unconfigured_r2() -> R2Client:
    """R2Client with no storage settings."""
    return R2Client(config=make_settings(
        r2_endpoint=None, r2_access_key=None, r2_secret_key=None, r2_bucket=None
    ))


def get_test_app(r2_client: R2Client) -> FastAPI:
    """Return the app with the storage dependency overridden."""
    from upload_gateway.main import app
    from upload_gateway.storage.r2_client import get_r2_client

    app.dependency_overrides[get_r2_client] = lambda: r2_client
    return app


@pytest.fixture
async def client(r2: R2Client) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = get_test_app(r2)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def unconfigured_client(unconfigured_r2: R2Client) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose storage has no settings."""
    app = get_test_app(unconfigured_r2)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
