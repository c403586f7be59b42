"""Abstract base class for object store backends."""

from abc import ABC, abstractmethod
from typing import BinaryIO, List

from models.storage_models import ObjectMetadata, SignedUrlOptions


class ObjectStoreBase(ABC):
    """Abstract base class for object store backends.

    A backend is bound to a single bucket and addresses objects by key.
    Every method raises BackendError on failure, and ObjectNotFoundError
    when the object does not exist.

    Required attributes (set in __init__):
        bucket: Name of the bucket the backend operates on
    """

    bucket: str

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store data under key, replacing any existing object."""

    @abstractmethod
    def get(self, key: str) -> BinaryIO:
        """Open the object for reading.

        Returns:
            A readable binary stream. The caller is responsible for closing it.
        """

    @abstractmethod
    def head(self, key: str) -> ObjectMetadata:
        """Fetch object metadata without the body.

        Only the backend-provided fields are filled in; hosted_url and name
        are left for the caller.
        """

    @abstractmethod
    def list_keys(self, prefix: str) -> List[str]:
        """List every key starting with prefix, across all pages."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the object. Deleting a missing key is not an error."""

    @abstractmethod
    def presign_get(self, key: str, options: SignedUrlOptions) -> str:
        """Generate a time-limited URL granting GET access to the object."""
