"""S3-compatible object storage for uploaded media.

Features:
- Boto3-based client with S3-compatible endpoint support (MinIO, LocalStack)
- Retry logic with exponential backoff
- Operation logging with key, timing and retry attempt
- Credentials only via settings, never logged
"""

import asyncio
import time
from collections.abc import Callable
from io import BytesIO
from typing import Any, BinaryIO

import boto3
from botocore.config import Config as BotoConfig  # type: ignore[import-not-found]
from botocore.exceptions import (  # type: ignore[import-not-found]
    BotoCoreError,
    ClientError,
    ConnectionError,
    EndpointConnectionError,
)

from fastpress.core.config import get_settings
from fastpress.core.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Base exception for storage errors."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key


class StorageNotConfiguredError(StorageError):
    """Raised when no bucket or credentials are configured."""


class StorageConnectionError(StorageError):
    """Raised when the storage endpoint cannot be reached."""


class StorageAuthError(StorageError):
    """Raised when storage authentication fails."""


class StorageNotFoundError(StorageError):
    """Raised when an object does not exist."""


class StorageClient:
    """Client for S3-compatible object storage."""

    def __init__(
        self,
        bucket: str | None = None,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str | None = None,
        public_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> None:
        """Initialize the storage client.

        Every argument defaults to the matching `S3_*` setting.
        """
        settings = get_settings()

        self._bucket = bucket or settings.s3_bucket
        self._endpoint_url = endpoint_url or settings.s3_endpoint_url
        self._access_key = access_key or settings.s3_access_key
        self._secret_key = secret_key or settings.s3_secret_key
        self._region = region or settings.s3_region
        self._public_url = public_url or settings.s3_public_url
        self._timeout = timeout or settings.s3_timeout
        self._max_retries = max_retries or settings.s3_max_retries
        self._retry_delay = retry_delay if retry_delay is not None else settings.s3_retry_delay

        self._client: Any = None
        self._available = bool(self._bucket and self._access_key and self._secret_key)

    @property
    def available(self) -> bool:
        """Check if storage is configured."""
        return self._available

    @property
    def bucket(self) -> str | None:
        """Get the configured bucket name."""
        return self._bucket

    def public_url(self, key: str) -> str:
        """Public URL of an object."""
        if self._public_url:
            return f"{self._public_url.rstrip('/')}/{key}"
        if self._endpoint_url:
            return f"{self._endpoint_url.rstrip('/')}/{self._bucket}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def _get_client(self) -> Any:
        """Get or create the boto3 client."""
        if self._client is None:
            boto_config = BotoConfig(
                connect_timeout=self._timeout,
                read_timeout=self._timeout,
                retries={"max_attempts": 0},
            )

            client_kwargs: dict[str, Any] = {
                "service_name": "s3",
                "aws_access_key_id": self._access_key,
                "aws_secret_access_key": self._secret_key,
                "region_name": self._region,
                "config": boto_config,
            }
            if self._endpoint_url:
                client_kwargs["endpoint_url"] = self._endpoint_url

            self._client = boto3.client(**client_kwargs)

        return self._client

    def _log_error(
        self,
        operation: str,
        duration_ms: float,
        error: str,
        error_type: str,
        key: str | None,
        retry_attempt: int,
    ) -> None:
        logger.error(
            f"Storage {operation} failed: {error}",
            extra={
                "storage_operation": operation,
                "storage_key": key,
                "storage_bucket": self._bucket,
                "duration_ms": round(duration_ms, 2),
                "error": error,
                "error_type": error_type,
                "retry_attempt": retry_attempt,
            },
        )

    async def _execute_with_retry(
        self,
        operation: str,
        func: Callable[[], Any],
        key: str | None = None,
    ) -> Any:
        """Run a blocking boto3 call in a worker thread with retries.

        Raises:
            StorageNotConfiguredError: If bucket or credentials are missing
            StorageAuthError: If authentication fails
            StorageNotFoundError: If the object does not exist
            StorageConnectionError: If the endpoint stays unreachable
            StorageError: For other errors
        """
        if not self._available:
            raise StorageNotConfiguredError(
                "Storage not configured (missing bucket, access_key, or secret_key)",
                operation=operation,
                key=key,
            )

        last_error: StorageError | None = None

        for attempt in range(self._max_retries):
            start_time = time.monotonic()
            try:
                result = await asyncio.to_thread(func)
                logger.info(
                    f"Storage {operation} completed",
                    extra={
                        "storage_operation": operation,
                        "storage_key": key,
                        "storage_bucket": self._bucket,
                        "duration_ms": round((time.monotonic() - start_time) * 1000, 2),
                    },
                )
                return result

            except ClientError as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                error_code = e.response.get("Error", {}).get("Code", "Unknown")
                error_message = e.response.get("Error", {}).get("Message", str(e))
                self._log_error(
                    operation, duration_ms, error_message, f"ClientError:{error_code}", key, attempt
                )

                if error_code in ("AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"):
                    raise StorageAuthError(
                        f"Authentication failed: {error_message}",
                        operation=operation,
                        key=key,
                    ) from e
                if error_code in ("NoSuchKey", "404"):
                    raise StorageNotFoundError(
                        f"Object not found: {key}",
                        operation=operation,
                        key=key,
                    ) from e
                if error_code == "NoSuchBucket":
                    raise StorageError(
                        f"Bucket not found: {self._bucket}",
                        operation=operation,
                        key=key,
                    ) from e

                last_error = StorageError(
                    f"Storage error ({error_code}): {error_message}",
                    operation=operation,
                    key=key,
                )

            except (EndpointConnectionError, ConnectionError) as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                self._log_error(operation, duration_ms, str(e), "ConnectionError", key, attempt)
                last_error = StorageConnectionError(
                    f"Connection failed: {e}",
                    operation=operation,
                    key=key,
                )

            except BotoCoreError as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                self._log_error(operation, duration_ms, str(e), type(e).__name__, key, attempt)
                last_error = StorageError(f"Storage error: {e}", operation=operation, key=key)

            if attempt < self._max_retries - 1:
                delay = self._retry_delay * (2**attempt)
                logger.warning(
                    f"Storage {operation} attempt {attempt + 1} failed, retrying in {delay}s",
                    extra={
                        "storage_operation": operation,
                        "storage_key": key,
                        "attempt": attempt + 1,
                        "max_retries": self._max_retries,
                        "delay_seconds": delay,
                    },
                )
                await asyncio.sleep(delay)

        if last_error:
            raise last_error
        raise StorageError("Operation failed after all retries", operation=operation, key=key)

    async def upload_file(
        self,
        key: str,
        file_obj: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """Upload a file and return its key."""
        client = self._get_client()
        if isinstance(file_obj, bytes):
            file_obj = BytesIO(file_obj)

        def upload() -> str:
            client.upload_fileobj(
                file_obj,
                self._bucket,
                key,
                ExtraArgs={"ContentType": content_type},
            )
            return key

        await self._execute_with_retry("upload_file", upload, key)
        return key

    async def delete_file(self, key: str) -> bool:
        """Delete an object.

        Raises:
            StorageNotFoundError: If the object does not exist
            StorageError: If deletion fails
        """
        client = self._get_client()

        def delete() -> bool:
            client.delete_object(Bucket=self._bucket, Key=key)
            return True

        result: bool = await self._execute_with_retry("delete_file", delete, key)
        return result


storage_client: StorageClient | None = None


async def init_storage() -> StorageClient:
    """Initialize the global storage client."""
    global storage_client
    if storage_client is None:
        storage_client = StorageClient()
        if storage_client.available:
            logger.info(
                "Storage client initialized",
                extra={"storage_bucket": storage_client.bucket},
            )
        else:
            logger.info("Storage not configured (missing credentials or bucket)")
    return storage_client


async def close_storage() -> None:
    """Drop the global storage client."""
    global storage_client
    if storage_client:
        storage_client = None
        logger.info("Storage client closed")


async def get_storage() -> StorageClient:
    """Dependency for getting the storage client."""
    if storage_client is None:
        await init_storage()
    return storage_client  # type: ignore[return-value]
