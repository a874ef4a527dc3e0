"""Control-plane facade for resumable multipart uploads to S3-compatible storage."""

__version__ = "0.1.0"
