"""
Tests for the S3 object store backend.

These tests mock the boto3 client to run without actual S3/MinIO.

Run with:
    pytest tests/test_object_store.py -v
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from config.storage_config import StorageConfig
from models.storage_models import SignedUrlOptions
from storage.errors import BackendError, ObjectNotFoundError
from storage.object_store import S3ObjectStore, build_s3_client


def _client_error(code: str, operation: str = "HeadObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(s3_client: MagicMock) -> S3ObjectStore:
    return S3ObjectStore(s3_client, "reports")


class TestBuildS3Client:
    def test_default_aws_client(self) -> None:
        config = StorageConfig(bucket="reports", region="eu-west-1")
        with patch("storage.object_store.boto3") as mock_boto3:
            build_s3_client(config)

        kwargs = mock_boto3.client.call_args.kwargs
        assert mock_boto3.client.call_args.args == ("s3",)
        assert kwargs["region_name"] == "eu-west-1"
        assert "endpoint_url" not in kwargs
        assert "aws_access_key_id" not in kwargs
        assert kwargs["config"].signature_version == "s3v4"
        assert kwargs["config"].s3 == {}

    def test_custom_endpoint_uses_path_style(self) -> None:
        config = StorageConfig(
            bucket="reports",
            endpoint_url="http://minio:9000",
            access_key="minioadmin",
            secret_key="miniosecret",
        )
        with patch("storage.object_store.boto3") as mock_boto3:
            build_s3_client(config)

        kwargs = mock_boto3.client.call_args.kwargs
        assert kwargs["endpoint_url"] == "http://minio:9000"
        assert kwargs["aws_access_key_id"] == "minioadmin"
        assert kwargs["aws_secret_access_key"] == "miniosecret"
        assert kwargs["config"].s3 == {"addressing_style": "path"}

    def test_forced_path_style(self) -> None:
        config = StorageConfig(bucket="reports", force_path_style=True)
        with patch("storage.object_store.boto3") as mock_boto3:
            build_s3_client(config)

        assert mock_boto3.client.call_args.kwargs["config"].s3 == {"addressing_style": "path"}

    def test_partial_credentials_ignored(self) -> None:
        config = StorageConfig(bucket="reports", access_key="only-key")
        with patch("storage.object_store.boto3") as mock_boto3:
            build_s3_client(config)

        assert "aws_access_key_id" not in mock_boto3.client.call_args.kwargs


class TestS3ObjectStoreInit:
    def test_none_client_rejected(self) -> None:
        with pytest.raises(ValueError):
            S3ObjectStore(None, "reports")

    def test_empty_bucket_rejected(self) -> None:
        with pytest.raises(ValueError):
            S3ObjectStore(MagicMock(), "")


class TestS3ObjectStore:
    def test_put(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        store.put("docs/a.pdf", b"%PDF", "application/pdf")

        s3_client.put_object.assert_called_once_with(
            Bucket="reports",
            Key="docs/a.pdf",
            Body=b"%PDF",
            ContentType="application/pdf",
        )

    def test_put_failure_wrapped(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        cause = _client_error("AccessDenied", "PutObject")
        s3_client.put_object.side_effect = cause

        with pytest.raises(BackendError) as exc_info:
            store.put("docs/a.pdf", b"x", "application/pdf")

        error = exc_info.value
        assert not isinstance(error, ObjectNotFoundError)
        assert error.operation == "put"
        assert error.key == "docs/a.pdf"
        assert error.bucket == "reports"
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_connection_failure_wrapped(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        s3_client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://minio:9000")

        with pytest.raises(BackendError):
            store.put("k", b"x", "text/csv")

    def test_get_returns_body(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        body = MagicMock()
        s3_client.get_object.return_value = {"Body": body}

        assert store.get("docs/a.pdf") is body
        s3_client.get_object.assert_called_once_with(Bucket="reports", Key="docs/a.pdf")

    def test_get_missing_key(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        s3_client.get_object.side_effect = _client_error("NoSuchKey", "GetObject")

        with pytest.raises(ObjectNotFoundError):
            store.get("missing")

    def test_head_maps_response(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        modified = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        s3_client.head_object.return_value = {
            "ContentLength": 42,
            "ContentType": "text/csv",
            "ContentDisposition": "inline",
            "LastModified": modified,
            "Metadata": {"owner": "ops"},
        }

        metadata = store.head("a/b.csv")

        assert metadata.size == 42
        assert metadata.content_type == "text/csv"
        assert metadata.content_disposition == "inline"
        assert metadata.last_modified == modified
        assert metadata.metadata == {"owner": "ops"}
        s3_client.head_object.assert_called_once_with(Bucket="reports", Key="a/b.csv")

    def test_head_missing_fields(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        s3_client.head_object.return_value = {}

        metadata = store.head("a")

        assert metadata.size == 0
        assert metadata.content_type == ""
        assert metadata.last_modified is None
        assert metadata.metadata == {}

    @pytest.mark.parametrize("code", ["404", "NoSuchKey", "NotFound"])
    def test_head_not_found(self, store: S3ObjectStore, s3_client: MagicMock, code: str) -> None:
        s3_client.head_object.side_effect = _client_error(code)

        with pytest.raises(ObjectNotFoundError) as exc_info:
            store.head("gone")
        assert exc_info.value.operation == "head"

    def test_head_forbidden_is_backend_error(
        self, store: S3ObjectStore, s3_client: MagicMock
    ) -> None:
        s3_client.head_object.side_effect = _client_error("403")

        with pytest.raises(BackendError) as exc_info:
            store.head("secret")
        assert not isinstance(exc_info.value, ObjectNotFoundError)

    def test_list_keys_across_pages(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"Contents": [{"Key": "p/a.csv"}, {"Key": "p/b.csv"}]},
            {"Contents": [{"Key": "p/c.csv"}, {"Size": 0}]},
            {},
        ]
        s3_client.get_paginator.return_value = paginator

        assert store.list_keys("p/") == ["p/a.csv", "p/b.csv", "p/c.csv"]
        s3_client.get_paginator.assert_called_once_with("list_objects_v2")
        paginator.paginate.assert_called_once_with(Bucket="reports", Prefix="p/")

    def test_list_keys_failure(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        paginator = MagicMock()
        paginator.paginate.side_effect = _client_error("AccessDenied", "ListObjectsV2")
        s3_client.get_paginator.return_value = paginator

        with pytest.raises(BackendError) as exc_info:
            store.list_keys("p/")
        assert exc_info.value.operation == "list"

    def test_delete(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        store.delete("p/a.csv")
        s3_client.delete_object.assert_called_once_with(Bucket="reports", Key="p/a.csv")

    def test_presign_default(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        s3_client.generate_presigned_url.return_value = "https://signed.example/a"

        url = store.presign_get("docs/a.pdf", SignedUrlOptions())

        assert url == "https://signed.example/a"
        s3_client.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={"Bucket": "reports", "Key": "docs/a.pdf"},
            ExpiresIn=1200,
        )

    def test_presign_with_overrides(self, store: S3ObjectStore, s3_client: MagicMock) -> None:
        options = SignedUrlOptions(
            content_type="application/pdf",
            content_disposition="attachment",
            expires_in=timedelta(hours=1),
        )

        store.presign_get("docs/a.pdf", options)

        s3_client.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={
                "Bucket": "reports",
                "Key": "docs/a.pdf",
                "ResponseContentType": "application/pdf",
                "ResponseContentDisposition": "attachment",
            },
            ExpiresIn=3600,
        )
