"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # HTTP server (used by run())
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Cloudflare R2 / S3-compatible storage
    # Clients upload parts directly to this bucket with presigned URLs
    r2_endpoint: Optional[str] = None  # e.g., https://<account_id>.r2.cloudflarestorage.com
    r2_bucket: Optional[str] = None  # Bucket name
    r2_access_key: Optional[str] = None  # R2 access key ID
    r2_secret_key: Optional[str] = None  # R2 secret access key
    r2_region: str = "auto"  # R2 uses "auto" for region
    part_url_expiration: int = 300  # Part upload URL expiration in seconds (5 min)

    # When False, missing storage settings only fail the first request that
    # needs the store. When True, startup refuses to run without them.
    strict_storage_config: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def missing_storage_settings(self) -> list[str]:
        """Names of the storage settings that are not set."""
        required = {
            "R2_ENDPOINT": self.r2_endpoint,
            "R2_ACCESS_KEY": self.r2_access_key,
            "R2_SECRET_KEY": self.r2_secret_key,
            "R2_BUCKET": self.r2_bucket,
        }
        return [name for name, value in required.items() if not value]


# Global settings instance
settings = Settings()
