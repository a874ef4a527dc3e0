"""
Tests for Pydantic schemas validation.
"""
import pytest
from pydantic import ValidationError

from upload_gateway.schemas.upload import (
    CompleteUploadRequest,
    InitiateUploadRequest,
    InitiateUploadResponse,
    ListPartsResponse,
    PartUrlRequest,
    PartUrlResponse,
    UploadedPart,
)


class TestInitiateSchemas:
    """Tests for upload initiation schemas."""

    def test_initiate_request_valid(self):
        """Test wire field names are accepted."""
        schema = InitiateUploadRequest.model_validate(
            {"filename": "video.mp4", "contentType": "video/mp4"}
        )
        assert schema.filename == "video.mp4"
        assert schema.content_type == "video/mp4"

    def test_initiate_request_content_type_optional(self):
        """Test content type may be omitted."""
        schema = InitiateUploadRequest.model_validate({"filename": "video.mp4"})
        assert schema.content_type is None

    def test_initiate_request_empty_filename(self):
        """Test empty filename raises error."""
        with pytest.raises(ValidationError):
            InitiateUploadRequest.model_validate({"filename": "", "contentType": "video/mp4"})

    def test_initiate_request_missing_filename(self):
        """Test missing filename raises error."""
        with pytest.raises(ValidationError):
            InitiateUploadRequest.model_validate({"contentType": "video/mp4"})

    def test_initiate_response_serializes_wire_names(self):
        """Test response uses uploadId on the wire."""
        schema = InitiateUploadResponse(upload_id="abc", key="uploads/1-video.mp4")
        assert schema.model_dump(by_alias=True) == {"uploadId": "abc", "key": "uploads/1-video.mp4"}


class TestPartUrlSchemas:
    """Tests for part URL schemas."""

    def test_part_url_request_valid(self):
        schema = PartUrlRequest.model_validate(
            {"uploadId": "abc", "key": "uploads/1-a.bin", "partNumber": 3}
        )
        assert schema.upload_id == "abc"
        assert schema.key == "uploads/1-a.bin"
        assert schema.part_number == 3

    def test_part_url_request_generic_names(self):
        """Test sessionToken/objectKey/chunkNumber aliases."""
        schema = PartUrlRequest.model_validate(
            {"sessionToken": "abc", "objectKey": "uploads/1-a.bin", "chunkNumber": 2}
        )
        assert schema.upload_id == "abc"
        assert schema.key == "uploads/1-a.bin"
        assert schema.part_number == 2

    @pytest.mark.parametrize("part_number", [0, -1])
    def test_part_url_request_rejects_non_positive(self, part_number):
        with pytest.raises(ValidationError):
            PartUrlRequest.model_validate(
                {"uploadId": "abc", "key": "k", "partNumber": part_number}
            )

    def test_part_url_request_missing_upload_id(self):
        with pytest.raises(ValidationError):
            PartUrlRequest.model_validate({"key": "k", "partNumber": 1})

    def test_part_url_response_serializes_expires_in(self):
        schema = PartUrlResponse(url="https://r2.test/x", expires_in=300)
        assert schema.model_dump(by_alias=True) == {"url": "https://r2.test/x", "expiresIn": 300}


class TestPartSchemas:
    """Tests for part and manifest schemas."""

    def test_uploaded_part_from_storage_shape(self):
        part = UploadedPart.model_validate({"PartNumber": 1, "ETag": '"abc"'})
        assert part.part_number == 1
        assert part.etag == '"abc"'
        assert part.to_storage() == {"PartNumber": 1, "ETag": '"abc"'}

    def test_uploaded_part_generic_names(self):
        part = UploadedPart.model_validate({"chunkNumber": 4, "integrityTag": "tag"})
        assert part.to_storage() == {"PartNumber": 4, "ETag": "tag"}

    def test_list_parts_response_serializes_wire_names(self):
        schema = ListPartsResponse(uploaded_parts=[{"PartNumber": 1, "ETag": "a"}])
        assert schema.model_dump(by_alias=True) == {
            "uploadedParts": [{"PartNumber": 1, "ETag": "a"}]
        }

    def test_complete_request_preserves_manifest_order(self):
        """Test manifest order is kept exactly as sent."""
        schema = CompleteUploadRequest.model_validate({
            "uploadId": "abc",
            "key": "k",
            "parts": [{"PartNumber": 2, "ETag": "b"}, {"PartNumber": 1, "ETag": "a"}],
        })
        assert [p.part_number for p in schema.parts] == [2, 1]

    def test_complete_request_manifest_alias(self):
        schema = CompleteUploadRequest.model_validate({
            "sessionToken": "abc",
            "objectKey": "k",
            "manifest": [{"chunkNumber": 1, "integrityTag": "a"}],
        })
        assert schema.parts[0].to_storage() == {"PartNumber": 1, "ETag": "a"}

    def test_complete_request_missing_parts(self):
        with pytest.raises(ValidationError):
            CompleteUploadRequest.model_validate({"uploadId": "abc", "key": "k"})
