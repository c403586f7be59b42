"""Storage-related Pydantic models.

Result and option objects exchanged between the storage service and its callers.
"""

from datetime import datetime, timedelta
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SIGNED_URL_EXPIRY = timedelta(minutes=20)


class SignedUrlOptions(BaseModel):
    """Options for generating a presigned GET URL.

    Attributes:
        content_type: Overrides the Content-Type header of the signed response.
        content_disposition: Overrides the Content-Disposition header, e.g.
            'attachment; filename="report.pdf"' to force a download.
        expires_in: How long the URL stays valid. Defaults to 20 minutes.
    """

    model_config = ConfigDict(frozen=True)

    content_type: Optional[str] = None
    content_disposition: Optional[str] = None
    expires_in: timedelta = DEFAULT_SIGNED_URL_EXPIRY

    @property
    def expires_in_seconds(self) -> int:
        return int(self.expires_in.total_seconds())


class ObjectMetadata(BaseModel):
    """Metadata of a stored object, as returned by a HEAD request."""

    model_config = ConfigDict(frozen=True)

    size: int = 0
    content_type: str = ""
    content_disposition: str = ""
    last_modified: Optional[datetime] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    hosted_url: str = ""
    name: str = ""
