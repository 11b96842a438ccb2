"""Integrations layer - External service clients."""

from fastpress.integrations.storage import (
    StorageAuthError,
    StorageClient,
    StorageConnectionError,
    StorageError,
    StorageNotConfiguredError,
    StorageNotFoundError,
    close_storage,
    get_storage,
    init_storage,
)

__all__ = [
    "StorageAuthError",
    "StorageClient",
    "StorageConnectionError",
    "StorageError",
    "StorageNotConfiguredError",
    "StorageNotFoundError",
    "close_storage",
    "get_storage",
    "init_storage",
]
