"""Error types raised by the object storage layer."""

from typing import Optional


class StorageError(Exception):
    """Base class for every error raised by this package."""


class InvalidURLError(StorageError, ValueError):
    """A hosted URL could not be parsed into an object key."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid object URL {url!r}: {reason}")


class BackendError(StorageError, RuntimeError):
    """The storage backend failed to perform an operation.

    Attributes:
        operation: Backend operation that failed ("put", "head", ...)
        key: Object key the operation was attempted on (may be empty)
        bucket: Bucket name, when known
        cause: Underlying exception raised by the SDK, if any
    """

    def __init__(
        self,
        operation: str,
        key: str,
        bucket: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.operation = operation
        self.key = key
        self.bucket = bucket
        self.cause = cause
        location = f"s3://{bucket}/{key}" if bucket else key
        message = f"Storage {operation} failed for {location}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ObjectNotFoundError(BackendError):
    """The backend reported that the object does not exist."""


class DeletionTimeoutError(StorageError, TimeoutError):
    """An object was deleted but its absence was not confirmed in time."""

    def __init__(self, key: str, bucket: Optional[str], timeout: float) -> None:
        self.key = key
        self.bucket = bucket
        self.timeout = timeout
        super().__init__(
            f"Could not confirm deletion of s3://{bucket}/{key} within {timeout:g}s"
        )
