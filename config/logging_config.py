"""Logging configuration.

Sets up console logging for the storage service and its tooling.
"""

import logging

from services.settings_helpers import get_setting


def setup_console_logging() -> logging.Logger:
    """Set up console logging.

    Returns:
        The logger used by the storage package.
    """
    console_level = get_setting("STORAGE_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, console_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return logging.getLogger("storage")
