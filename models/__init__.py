"""Model definitions for storage results and options."""

from .storage_models import (  # noqa: F401
    DEFAULT_SIGNED_URL_EXPIRY,
    ObjectMetadata,
    SignedUrlOptions,
)
