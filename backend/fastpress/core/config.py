"""Application configuration loaded from environment variables.

All configuration is via environment variables (or a local .env file).
No hardcoded URLs, ports, or credentials.
"""

from functools import lru_cache

from pydantic import Field, PostgresDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="FastPress")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Server
    port: int = Field(default=8000, description="Port to bind to")
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    frontend_url: str | None = Field(
        default=None, description="Admin/public site origin allowed by CORS"
    )

    # Database
    database_url: PostgresDsn = Field(
        ...,
        description="PostgreSQL connection string",
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size")
    db_max_overflow: int = Field(default=10, description="Max overflow connections")
    db_pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    db_slow_query_threshold_ms: int = Field(
        default=100, description="Threshold for slow query warnings (ms)"
    )
    db_connect_timeout: int = Field(
        default=60, description="Connection timeout in seconds"
    )
    db_command_timeout: int = Field(
        default=60, description="Command timeout in seconds"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # Auth
    auth_required: bool = Field(
        default=True,
        description="Validate Bearer sessions; when false every request runs as a dev administrator",
    )

    # Site (feeds, sitemap, robots.txt)
    site_url: str = Field(
        default="http://localhost:3000", description="Public site base URL"
    )
    site_title: str = Field(default="FastPress", description="Site title for feeds")
    site_description: str = Field(
        default="A FastPress site", description="Site description for feeds"
    )
    feed_item_limit: int = Field(default=20, description="Posts included in feed.xml")

    # Pagination
    default_page_size: int = Field(default=20, description="Default list page size")
    max_page_size: int = Field(default=100, description="Maximum list page size")

    # S3 media storage
    s3_bucket: str | None = Field(default=None, description="S3 bucket for media")
    s3_endpoint_url: str | None = Field(
        default=None, description="S3-compatible endpoint (MinIO, LocalStack)"
    )
    s3_access_key: str | None = Field(default=None, description="S3 access key")
    s3_secret_key: str | None = Field(default=None, description="S3 secret key")
    s3_region: str = Field(default="us-east-1", description="S3 region")
    s3_public_url: str | None = Field(
        default=None, description="Public base URL media objects are served from"
    )
    s3_timeout: float = Field(default=30.0, description="S3 operation timeout in seconds")
    s3_max_retries: int = Field(default=3, description="Maximum S3 retry attempts")
    s3_retry_delay: float = Field(
        default=1.0, description="Base delay between S3 retries in seconds"
    )
    media_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Maximum media upload size in bytes"
    )

    # WordPress import
    wxr_max_bytes: int = Field(
        default=50 * 1024 * 1024, description="Maximum WXR export size accepted"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
