"""
In-memory object store backend.

Keeps objects in a dict so the storage service can be exercised without a
bucket. Signed URLs are fake but deterministic.
"""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Optional
from urllib.parse import quote, urlencode

from models.storage_models import ObjectMetadata, SignedUrlOptions
from storage.base import ObjectStoreBase
from storage.errors import ObjectNotFoundError


@dataclass
class StoredObject:
    """One object held by InMemoryObjectStore, with the headers head() reports."""

    data: bytes
    content_type: str
    content_disposition: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)
    last_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryObjectStore(ObjectStoreBase):
    """Dict-backed object store used for tests and local development.

    Set linger_after_delete to keep a deleted object visible to that many
    head() calls, mimicking a store whose deletes become visible late.
    """

    def __init__(self, bucket: str = "memory-bucket", linger_after_delete: int = 0) -> None:
        self.bucket = bucket
        self.linger_after_delete = linger_after_delete
        self.objects: Dict[str, StoredObject] = {}
        self._lingering: Dict[str, int] = {}
        self._lock = threading.Lock()

    def _lookup(self, operation: str, key: str) -> StoredObject:
        obj = self.objects.get(key)
        if obj is None:
            raise ObjectNotFoundError(operation, key, self.bucket)
        return obj

    def put(self, key: str, data: bytes, content_type: str) -> None:
        with self._lock:
            self._lingering.pop(key, None)
            self.objects[key] = StoredObject(data=bytes(data), content_type=content_type)

    def get(self, key: str) -> BinaryIO:
        with self._lock:
            return io.BytesIO(self._lookup("get", key).data)

    def head(self, key: str) -> ObjectMetadata:
        with self._lock:
            remaining = self._lingering.get(key)
            if remaining is not None:
                if remaining > 0:
                    self._lingering[key] = remaining - 1
                else:
                    del self._lingering[key]
                    self.objects.pop(key, None)
            obj = self._lookup("head", key)
        return ObjectMetadata(
            size=len(obj.data),
            content_type=obj.content_type,
            content_disposition=obj.content_disposition,
            last_modified=obj.last_modified,
            metadata=dict(obj.metadata),
        )

    def list_keys(self, prefix: str) -> List[str]:
        with self._lock:
            return sorted(
                key
                for key in self.objects
                if key.startswith(prefix) and key not in self._lingering
            )

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self.objects:
                return
            if self.linger_after_delete > 0:
                self._lingering[key] = self.linger_after_delete
            else:
                del self.objects[key]

    def presign_get(self, key: str, options: SignedUrlOptions) -> str:
        query: Dict[str, str] = {"expires": str(options.expires_in_seconds)}
        if options.content_type is not None:
            query["response-content-type"] = options.content_type
        if options.content_disposition is not None:
            query["response-content-disposition"] = options.content_disposition
        return f"memory://{self.bucket}/{quote(key, safe='/')}?{urlencode(query)}"

    def stored(self, key: str) -> Optional[StoredObject]:
        """Return the raw stored object, or None. Intended for assertions."""
        return self.objects.get(key)
