"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
The settings object is built once per process and handed to route handlers
through FastAPI dependencies, so nothing downstream reads os.environ directly.

Mock mode enables local development without a real bucket.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Field names map to upper-case env vars (AWS_REGION, S3_BUCKET, PORT, ...).
    """

    # Application
    app_title: str = "Educational Video Platform"
    app_version: str = "0.1.0"
    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )
    port: int = Field(
        default=3000,
        description="Listening port"
    )

    # S3 Storage Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="Region of the video bucket. Also used to build public URLs."
    )
    s3_bucket: str = Field(
        default="",
        description="Bucket holding uploaded videos. Required unless in mock mode."
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom endpoint for S3-compatible stores (MinIO, localstack)"
    )
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="Access key. Falls back to the boto3 credential chain when unset."
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="Secret key. Falls back to the boto3 credential chain when unset."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of S3. Enables local dev without a bucket."
    )

    # Catalog behaviour
    video_prefix: str = Field(
        default="videos/",
        description="Key prefix under which videos are stored and listed"
    )
    upload_acl: str = Field(
        default="public-read",
        description="Canned ACL applied to uploaded objects"
    )
    upload_field_name: str = Field(
        default="video",
        description="Multipart form field carrying the uploaded file"
    )
    max_upload_size_mb: int = Field(
        default=100,
        description="Maximum upload size in MiB. Uploads are buffered in memory."
    )
    list_all_pages: bool = Field(
        default=False,
        description="Follow continuation tokens when listing. Off means only the first page is shown."
    )

    # Logging
    log_level: LogLevel = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Accept lower-case level names from the environment."""
        return value.upper() if isinstance(value, str) else value

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def validate_required_fields(self) -> list[str]:
        """
        Return env names of required settings that are missing.

        Requirements depend on mock mode, so this lives outside
        Pydantic's field validation.
        """
        missing = []

        if not self.storage_mock_mode and not self.s3_bucket:
            missing.append("S3_BUCKET")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings don't change during runtime, so we load them once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
