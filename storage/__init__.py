"""Storage module for S3-compatible object storage."""

from .base import ObjectStoreBase
from .errors import (
    BackendError,
    DeletionTimeoutError,
    InvalidURLError,
    ObjectNotFoundError,
    StorageError,
)
from .memory_store import InMemoryObjectStore, StoredObject
from .object_store import S3ObjectStore, build_s3_client

__all__ = [
    "ObjectStoreBase",
    "S3ObjectStore",
    "InMemoryObjectStore",
    "StoredObject",
    "build_s3_client",
    "StorageError",
    "InvalidURLError",
    "BackendError",
    "ObjectNotFoundError",
    "DeletionTimeoutError",
]
