"""
File name sanitization for object keys.

Turns an untrusted, user-supplied file name into a token that is safe to use
as the last segment of an object key:

    "My File!!.CSV"  ->  "my_file.csv"

The rules must stay stable: objects already stored were named with them, and
callers rebuild keys from names they sanitized earlier.

One deliberate departure from the legacy rules: when a base name is cut to
fit MAX_FILE_NAME_LENGTH and the cut ends on ".", "-" or "_", those
characters are stripped as well. Such names come out shorter than the limit
(e.g. 1023 characters instead of 1024), but a second pass leaves them
unchanged. Names that need no truncation are not affected.

The extension is only lower-cased, never filtered.
"""

import re

MAX_FILE_NAME_LENGTH = 1024

_SPACES = re.compile(r" +")
_UNSAFE_CHARS = re.compile(r"[^a-z0-9._-]+")
_EDGE_CHARS = "._-"


def split_extension(file_name: str) -> tuple[str, str]:
    """
    Split a file name at its last dot.

    Returns:
        (base, extension) where extension keeps its leading dot, or is ""
        when the name has no dot at all.
    """
    idx = file_name.rfind(".")
    if idx == -1:
        return file_name, ""
    return file_name[:idx], file_name[idx:]


def sanitize_file_name(file_name: str) -> str:
    """
    Sanitize a file name so it can be stored safely.

    Only the base name is rewritten; the extension is lower-cased and kept
    as is. The result never exceeds MAX_FILE_NAME_LENGTH unless the
    extension alone does, in which case the base is dropped entirely.

    Args:
        file_name: Raw file name, e.g. from an upload form

    Returns:
        Sanitized file name (may be empty for an empty input)
    """
    base, extension = split_extension(file_name.lower())

    base = _SPACES.sub("_", base)
    base = _UNSAFE_CHARS.sub("_", base)
    base = base.strip(_EDGE_CHARS)

    max_base_length = max(MAX_FILE_NAME_LENGTH - len(extension), 0)
    if len(base) > max_base_length:
        # A cut can land right after a separator
        base = base[:max_base_length].rstrip(_EDGE_CHARS)

    return base + extension
