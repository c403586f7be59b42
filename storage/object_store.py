"""
S3 object store backend (AWS S3 and S3-compatible services such as MinIO).

The backend is a thin layer over a boto3 S3 client bound to one bucket.
Retries, credentials, pagination and request signing are left to
boto3/botocore; this module only marshals parameters and translates SDK
failures into BackendError / ObjectNotFoundError.
"""

import logging
from typing import Any, BinaryIO, List, Optional

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from config.storage_config import StorageConfig
from models.storage_models import ObjectMetadata, SignedUrlOptions
from storage.base import ObjectStoreBase
from storage.errors import BackendError, ObjectNotFoundError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def build_s3_client(config: StorageConfig) -> BaseClient:
    """
    Create a boto3 S3 client configured for AWS S3 or MinIO.

    - endpoint_url: If set, targets MinIO (or another S3-compatible endpoint)
      and switches to path-style addressing
    - force_path_style: Path-style addressing without a custom endpoint
    - access_key/secret_key: Static credentials; otherwise the default boto3
      credential chain applies
    """
    client_kwargs: dict[str, Any] = {}

    s3_options = {"addressing_style": "path"} if config.use_path_style else {}
    client_kwargs["config"] = Config(signature_version="s3v4", s3=s3_options)

    if config.endpoint_url:
        client_kwargs["endpoint_url"] = config.endpoint_url

    if config.access_key and config.secret_key:
        client_kwargs["aws_access_key_id"] = config.access_key
        client_kwargs["aws_secret_access_key"] = config.secret_key

    return boto3.client("s3", region_name=config.region, **client_kwargs)


def _is_not_found(exc: ClientError) -> bool:
    code = exc.response.get("Error", {}).get("Code")
    return str(code) in _NOT_FOUND_CODES


class S3ObjectStore(ObjectStoreBase):
    """Object store backed by a boto3 S3 client."""

    def __init__(self, client: BaseClient, bucket: str) -> None:
        if client is None:
            raise ValueError("S3 client is None")
        if not bucket:
            raise ValueError("S3 bucket name is empty")
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_config(cls, config: StorageConfig) -> "S3ObjectStore":
        return cls(build_s3_client(config), config.bucket)

    def _error(self, operation: str, key: str, exc: Exception) -> BackendError:
        if isinstance(exc, ClientError) and _is_not_found(exc):
            logger.debug("Object s3://%s/%s not found during %s", self.bucket, key, operation)
            return ObjectNotFoundError(operation, key, self.bucket, exc)
        logger.exception("S3 %s failed for s3://%s/%s: %s", operation, self.bucket, key, exc)
        return BackendError(operation, key, self.bucket, exc)

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._error("put", key, exc) from exc
        logger.debug("Uploaded %d bytes to s3://%s/%s", len(data), self.bucket, key)

    def get(self, key: str) -> BinaryIO:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._error("get", key, exc) from exc
        return response["Body"]

    def head(self, key: str) -> ObjectMetadata:
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._error("head", key, exc) from exc

        return ObjectMetadata(
            size=response.get("ContentLength") or 0,
            content_type=response.get("ContentType") or "",
            content_disposition=response.get("ContentDisposition") or "",
            last_modified=response.get("LastModified"),
            metadata=response.get("Metadata") or {},
        )

    def list_keys(self, prefix: str) -> List[str]:
        keys: List[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    key: Optional[str] = obj.get("Key")
                    if key is None:
                        continue
                    keys.append(key)
        except (ClientError, BotoCoreError) as exc:
            raise self._error("list", prefix, exc) from exc
        return keys

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._error("delete", key, exc) from exc

    def presign_get(self, key: str, options: SignedUrlOptions) -> str:
        params = {"Bucket": self.bucket, "Key": key}
        if options.content_type is not None:
            params["ResponseContentType"] = options.content_type
        if options.content_disposition is not None:
            params["ResponseContentDisposition"] = options.content_disposition

        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=options.expires_in_seconds,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._error("presign", key, exc) from exc
