"""
Pydantic schemas for multipart upload endpoints.

Wire names follow the original browser client (uploadId, key, partNumber,
PartNumber/ETag). The generic names sessionToken, objectKey, chunkNumber,
manifest and integrityTag are accepted as input aliases.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional


class UploadedPart(BaseModel):
    """One committed part: part number plus the ETag R2 assigned to it."""
    part_number: int = Field(
        ...,
        validation_alias=AliasChoices("PartNumber", "partNumber", "chunkNumber"),
        serialization_alias="PartNumber",
        description="1-based part number"
    )
    etag: str = Field(
        ...,
        validation_alias=AliasChoices("ETag", "etag", "integrityTag"),
        serialization_alias="ETag",
        description="ETag returned by storage for this part"
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_storage(self) -> dict:
        return {"PartNumber": self.part_number, "ETag": self.etag}


class InitiateUploadRequest(BaseModel):
    """Request schema for opening a multipart upload."""
    filename: str = Field(..., min_length=1, description="Original filename")
    content_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("contentType", "content_type"),
        description="MIME type of the final object (e.g., 'video/mp4')"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "filename": "video.mp4",
                "contentType": "video/mp4"
            }
        }
    )


class InitiateUploadResponse(BaseModel):
    """Response schema for an opened multipart upload."""
    upload_id: str = Field(..., alias="uploadId", description="Multipart upload ID")
    key: str = Field(..., description="Object key the upload is bound to")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uploadId": "2~abc123",
                "key": "uploads/1700000000000-video.mp4"
            }
        }
    )


class _UploadRef(BaseModel):
    upload_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("uploadId", "upload_id", "sessionToken"),
        description="Multipart upload ID from /initiate-upload"
    )
    key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("key", "objectKey"),
        description="Object key from /initiate-upload"
    )

    model_config = ConfigDict(populate_by_name=True)


class PartUrlRequest(_UploadRef):
    """Request schema for a presigned part URL."""
    part_number: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("partNumber", "part_number", "chunkNumber"),
        description="1-based part number"
    )


class PartUrlResponse(BaseModel):
    """Response schema for a presigned part URL."""
    url: str = Field(..., description="Presigned PUT URL for this part")
    expires_in: int = Field(..., alias="expiresIn", description="URL expiration time in seconds")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://<account>.r2.cloudflarestorage.com/bucket/uploads/...?partNumber=1&uploadId=...",
                "expiresIn": 300
            }
        }
    )


class ListPartsRequest(_UploadRef):
    """Request schema for listing committed parts."""


class ListPartsResponse(BaseModel):
    """Committed parts, ascending by part number."""
    uploaded_parts: list[UploadedPart] = Field(..., alias="uploadedParts")

    model_config = ConfigDict(populate_by_name=True)


class CompleteUploadRequest(_UploadRef):
    """Request schema for completing a multipart upload."""
    parts: list[UploadedPart] = Field(
        ...,
        validation_alias=AliasChoices("parts", "manifest"),
        description="Every uploaded part with its ETag, ascending by part number"
    )


class CompleteUploadResponse(BaseModel):
    """Response schema for upload completion."""
    success: bool = Field(..., description="Whether completion was successful")


class ErrorResponse(BaseModel):
    """Body returned when storage fails an operation."""
    error: str
