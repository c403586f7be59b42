"""Object storage configuration.

Environment Variables:
    AWS_BUCKET: Bucket name (required)
    AWS_REGION: AWS region (default: us-east-1)
    AWS_ENDPOINT_URL: MinIO or custom S3-compatible endpoint (optional)
    S3_FORCE_PATH_STYLE: Use path-style addressing even without a custom endpoint
    AWS_ACCESS_KEY_ID: Access key (optional, falls back to the boto3 chain)
    AWS_SECRET_ACCESS_KEY: Secret key (optional)
    STORAGE_PUBLIC_DOMAIN: Domain used in hosted URLs (default: s3.{region}.amazonaws.com)
    STORAGE_DELETE_TIMEOUT_SECONDS: Deletion confirmation budget (default: 30)
    STORAGE_DELETE_POLL_SECONDS: Delay between deletion checks (default: 5)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from services.settings_helpers import (
    get_bool_setting,
    get_float_setting,
    get_setting,
)

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
DEFAULT_DELETE_TIMEOUT_SECONDS = 30.0
DEFAULT_DELETE_POLL_SECONDS = 5.0


@dataclass(frozen=True)
class StorageConfig:
    bucket: str
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    force_path_style: bool = False
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    public_domain: Optional[str] = None
    delete_timeout_seconds: float = DEFAULT_DELETE_TIMEOUT_SECONDS
    delete_poll_interval_seconds: float = DEFAULT_DELETE_POLL_SECONDS

    @property
    def storage_domain(self) -> str:
        """Domain that hosted URLs are served from, without the bucket label."""
        if self.public_domain:
            return self.public_domain
        return f"s3.{self.region}.amazonaws.com"

    @property
    def use_path_style(self) -> bool:
        # Custom endpoints (MinIO, localstack) only serve path-style requests
        return self.force_path_style or bool(self.endpoint_url)


def load_storage_config() -> StorageConfig:
    """Build a StorageConfig from environment variables.

    Raises:
        ValueError: If AWS_BUCKET is not set
    """
    bucket = get_setting("AWS_BUCKET", "")
    if not bucket:
        raise ValueError("AWS_BUCKET must be set to use object storage")

    config = StorageConfig(
        bucket=bucket,
        region=get_setting("AWS_REGION", DEFAULT_REGION),
        endpoint_url=get_setting("AWS_ENDPOINT_URL", None),
        force_path_style=get_bool_setting("S3_FORCE_PATH_STYLE", False),
        access_key=get_setting("AWS_ACCESS_KEY_ID", None),
        secret_key=get_setting("AWS_SECRET_ACCESS_KEY", None),
        public_domain=get_setting("STORAGE_PUBLIC_DOMAIN", None),
        delete_timeout_seconds=get_float_setting(
            "STORAGE_DELETE_TIMEOUT_SECONDS", DEFAULT_DELETE_TIMEOUT_SECONDS
        ),
        delete_poll_interval_seconds=get_float_setting(
            "STORAGE_DELETE_POLL_SECONDS", DEFAULT_DELETE_POLL_SECONDS
        ),
    )
    logger.debug(
        "Loaded storage config: bucket=%s region=%s endpoint=%s",
        config.bucket,
        config.region,
        config.endpoint_url or "default",
    )
    return config
