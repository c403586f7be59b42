"""
Translation between object keys and hosted URLs.

Hosted URLs use virtual-hosted style addressing:

    https://{bucket}.{storage_domain}/{key}

e.g. https://reports.s3.us-east-1.amazonaws.com/2024/q1/summary.pdf, whose
object key is "2024/q1/summary.pdf".
"""

from urllib.parse import quote, unquote, urlsplit

from storage.errors import InvalidURLError


def resolve_object_key(hosted_url: str) -> str:
    """
    Extract the object key from a hosted URL.

    The key is the URL path, percent-decoded, without its leading '/'.
    A URL without a path (or with just '/') yields an empty key.

    Raises:
        InvalidURLError: If hosted_url is not an absolute URL
    """
    try:
        parts = urlsplit(hosted_url)
    except ValueError as exc:
        raise InvalidURLError(hosted_url, str(exc)) from exc

    if not parts.scheme or not parts.netloc:
        raise InvalidURLError(hosted_url, "expected an absolute URL with scheme and host")

    path = unquote(parts.path)
    if path.startswith("/"):
        path = path[1:]
    return path


def build_object_key(file_path: str, file_name: str) -> str:
    """
    Compose an object key from a folder-like path and a file name.

    Args:
        file_path: Key prefix such as "uploads/2024" (may be empty)
        file_name: Final key segment, normally already sanitized

    Returns:
        Key like "uploads/2024/report.csv"
    """
    file_path = file_path.lstrip("/")
    if not file_path:
        return file_name
    return f"{file_path}/{file_name}"


def build_hosted_url(bucket: str, storage_domain: str, key: str) -> str:
    """
    Build the hosted URL at which an object is served.

    The key is percent-encoded so that resolve_object_key() gives it back
    unchanged; keys made of safe characters appear verbatim.
    """
    return f"https://{bucket}.{storage_domain}/{quote(key, safe='/')}"


def object_name(key: str) -> str:
    """Return the last path segment of a key (its display name)."""
    return key.rsplit("/", 1)[-1]
