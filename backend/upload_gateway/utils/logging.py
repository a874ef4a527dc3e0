"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- upload_id
- object_key
- part_number
- duration_ms

Usage:
    from upload_gateway.utils.logging import configure_logging, log_upload_initiated

    configure_logging('upload-gateway', 'INFO')
    log_upload_initiated(logger, upload_id='abc', object_key='uploads/1-a.bin')
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (upload-gateway)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    upload_id: Optional[str] = None,
    object_key: Optional[str] = None,
    part_number: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        upload_id: Optional multipart upload ID
        object_key: Optional object key
        part_number: Optional part number
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if upload_id:
        extra["upload_id"] = upload_id
    if object_key:
        extra["object_key"] = object_key
    if part_number is not None:
        extra["part_number"] = part_number
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Multipart session event functions

def log_upload_initiated(
    logger: logging.Logger,
    upload_id: str,
    object_key: str,
    duration_ms: Optional[float] = None,
    content_type: Optional[str] = None,
    **kwargs
):
    """
    Log multipart upload initiation.

    Args:
        logger: Logger instance
        upload_id: Store-assigned upload ID (required)
        object_key: Object key the upload is bound to (required)
        duration_ms: Optional duration in milliseconds
        content_type: Optional declared content type
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_initiated",
        upload_id=upload_id,
        object_key=object_key,
        duration_ms=duration_ms,
        **kwargs
    )
    if content_type:
        extra["content_type"] = content_type

    logger.info(f"Upload initiated: {object_key}", extra=extra)


def log_part_url_issued(
    logger: logging.Logger,
    upload_id: str,
    object_key: str,
    part_number: int,
    expires_in: int,
    **kwargs
):
    """Log issuance of a presigned part upload URL."""
    extra = _build_log_extra(
        event="part_url_issued",
        upload_id=upload_id,
        object_key=object_key,
        part_number=part_number,
        expires_in=expires_in,
        **kwargs
    )

    logger.debug(f"Part URL issued: {object_key} part {part_number}", extra=extra)


def log_parts_listed(
    logger: logging.Logger,
    upload_id: str,
    object_key: str,
    part_count: int,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a committed-parts listing."""
    extra = _build_log_extra(
        event="parts_listed",
        upload_id=upload_id,
        object_key=object_key,
        duration_ms=duration_ms,
        part_count=part_count,
        **kwargs
    )

    logger.info(f"Listed {part_count} uploaded parts: {object_key}", extra=extra)


def log_upload_completed(
    logger: logging.Logger,
    upload_id: str,
    object_key: str,
    part_count: int,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log multipart upload completion.

    Args:
        logger: Logger instance
        upload_id: Store-assigned upload ID (required)
        object_key: Final object key (required)
        part_count: Number of parts in the manifest
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_completed",
        upload_id=upload_id,
        object_key=object_key,
        duration_ms=duration_ms,
        part_count=part_count,
        **kwargs
    )

    logger.info(f"Upload completed: {object_key}", extra=extra)


def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    reason: str,
    error: str,
    upload_id: Optional[str] = None,
    object_key: Optional[str] = None,
    **kwargs
):
    """
    Log an object store failure.

    Args:
        logger: Logger instance
        operation: Store operation name (required)
        reason: StorageFailure tag value (required)
        error: Error message (required)
        upload_id: Optional upload ID
        object_key: Optional object key
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        upload_id=upload_id,
        object_key=object_key,
        operation=operation,
        reason=reason,
        error=str(error),
        **kwargs
    )

    logger.error(f"Storage failure: {operation} [{reason}] - {error}", extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
