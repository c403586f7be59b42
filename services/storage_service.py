"""
Storage service for files kept in a single object storage bucket.

This service handles:
1. Uploading files under a folder-like path with a sanitized name
2. Translating hosted URLs back into object keys
3. Signed URLs, metadata lookups, streaming downloads and listings
4. Deleting objects and waiting until the deletion is visible

Objects are identified towards callers by their hosted URL:
    https://{bucket}.{storage_domain}/{path}/{sanitized_name}
"""

import logging
import time
from typing import BinaryIO, Callable, List, Optional

from dotenv import load_dotenv

from config.storage_config import StorageConfig, load_storage_config
from models.storage_models import ObjectMetadata, SignedUrlOptions
from services.file_names import sanitize_file_name
from services.object_keys import (
    build_hosted_url,
    build_object_key,
    object_name,
    resolve_object_key,
)
from storage.base import ObjectStoreBase
from storage.errors import DeletionTimeoutError, ObjectNotFoundError
from storage.object_store import S3ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_CONTENT_TYPES = {
    ".csv": "text/csv",
    ".pdf": "application/pdf",
}


def content_type_for(file_name: str) -> str:
    """Pick the Content-Type stored with an upload from its file name."""
    for suffix, content_type in _CONTENT_TYPES.items():
        if file_name.endswith(suffix):
            return content_type
    return DEFAULT_CONTENT_TYPE


class StorageService:
    """Upload, read and delete files in one bucket.

    The service is stateless apart from its backend and configuration, so a
    single instance can be shared between threads.
    """

    def __init__(
        self,
        store: ObjectStoreBase,
        config: StorageConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if store is None:
            raise ValueError("Object store backend is None")
        self.store = store
        self.config = config
        self._clock = clock
        self._sleep = sleep

    @property
    def bucket(self) -> str:
        return self.config.bucket

    def hosted_url(self, key: str) -> str:
        return build_hosted_url(self.bucket, self.config.storage_domain, key)

    def upload(self, file_path: str, file_name: str, data: bytes) -> str:
        """
        Upload bytes under file_path with a sanitized version of file_name.

        Args:
            file_path: Folder-like key prefix, e.g. "tenants/42/reports"
            file_name: Original (untrusted) file name
            data: File contents

        Returns:
            Hosted URL of the stored object

        Raises:
            BackendError: If the upload fails
        """
        sanitized = sanitize_file_name(file_name)
        key = build_object_key(file_path, sanitized)
        content_type = content_type_for(sanitized)

        self.store.put(key, data, content_type)

        location = self.hosted_url(key)
        logger.info("Uploaded %s (%d bytes, %s)", location, len(data), content_type)
        return location

    def get_signed_url(
        self, hosted_url: str, options: Optional[SignedUrlOptions] = None
    ) -> str:
        """
        Generate a presigned GET URL for a hosted object.

        Args:
            hosted_url: URL returned by upload() or list_objects()
            options: Response header overrides and expiry; defaults to a
                20 minute URL with no overrides

        Raises:
            InvalidURLError: If hosted_url cannot be parsed
            BackendError: If presigning fails
        """
        key = resolve_object_key(hosted_url)
        if options is None:
            options = SignedUrlOptions()
        return self.store.presign_get(key, options)

    def get_metadata(self, hosted_url: str) -> ObjectMetadata:
        """
        Look up size, content headers and user metadata of a hosted object.

        Raises:
            InvalidURLError: If hosted_url cannot be parsed
            ObjectNotFoundError: If the object does not exist
            BackendError: If the lookup fails
        """
        key = resolve_object_key(hosted_url)
        metadata = self.store.head(key)
        return metadata.model_copy(
            update={"hosted_url": hosted_url, "name": object_name(key)}
        )

    def get_file_stream(self, hosted_url: str) -> BinaryIO:
        """
        Open a hosted object for streaming. The caller must close the stream.

        Raises:
            InvalidURLError: If hosted_url cannot be parsed
            BackendError: If the download cannot be started
        """
        key = resolve_object_key(hosted_url)
        return self.store.get(key)

    def list_objects(self, prefix: str) -> List[str]:
        """
        List hosted URLs of every object whose key starts with prefix.

        Raises:
            BackendError: If listing fails
        """
        return [self.hosted_url(key) for key in self.store.list_keys(prefix)]

    def object_exists(self, hosted_url: str) -> bool:
        """
        Check whether a hosted object exists.

        Raises:
            InvalidURLError: If hosted_url cannot be parsed
            BackendError: If the check fails for a reason other than absence
        """
        key = resolve_object_key(hosted_url)
        try:
            self.store.head(key)
        except ObjectNotFoundError:
            return False
        return True

    def delete_object(self, hosted_url: str) -> None:
        """
        Delete a hosted object and wait until the deletion is visible.

        Raises:
            InvalidURLError: If hosted_url cannot be parsed
            BackendError: If the delete request fails
            DeletionTimeoutError: If the object is still visible after
                config.delete_timeout_seconds
        """
        key = resolve_object_key(hosted_url)
        self.store.delete(key)
        self._wait_until_deleted(key)
        logger.info("Deleted %s", hosted_url)

    def _wait_until_deleted(self, key: str) -> None:
        timeout = self.config.delete_timeout_seconds
        deadline = self._clock() + timeout
        while True:
            try:
                self.store.head(key)
            except ObjectNotFoundError:
                return

            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(
                    "Deletion of s3://%s/%s not confirmed after %.0fs",
                    self.bucket,
                    key,
                    timeout,
                )
                raise DeletionTimeoutError(key, self.bucket, timeout)

            logger.debug("s3://%s/%s still visible, checking again", self.bucket, key)
            self._sleep(min(self.config.delete_poll_interval_seconds, remaining))


def create_storage_service(config: Optional[StorageConfig] = None) -> StorageService:
    """
    Create a StorageService backed by S3.

    Loads .env and reads the configuration from the environment when
    config is not given.
    """
    if config is None:
        load_dotenv()
        config = load_storage_config()
    return StorageService(S3ObjectStore.from_config(config), config)
