"""Secure logging utilities to prevent information disclosure."""

import logging
import re
from functools import lru_cache

from staff_api.config import get_settings

MAX_LOGGED_MESSAGE_LENGTH = 200


@lru_cache(maxsize=1)
def is_debug_mode() -> bool:
    """Check if application is running in debug mode."""
    return get_settings().debug


def sanitize_exception_message(error: Exception) -> str:
    """Strip paths, connection strings, emails and tokens from an error.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message suitable for production logs
    """
    error_msg = str(error)

    # URLs before paths; a URL contains path-like segments
    error_msg = re.sub(
        r"(postgresql|postgres|sqlite|redis|rediss|http|https)(\+\w+)?://[^\s]+", "[URL]", error_msg
    )
    error_msg = re.sub(r"['\"]?(/[a-zA-Z0-9_./\-]+|[A-Z]:\\[^\s'\"]+)['\"]?", "[PATH]", error_msg)
    error_msg = re.sub(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+", "[EMAIL]", error_msg)
    error_msg = re.sub(r"[a-zA-Z0-9_\-]{32,}", "[TOKEN]", error_msg)

    if len(error_msg) > MAX_LOGGED_MESSAGE_LENGTH:
        error_msg = error_msg[: MAX_LOGGED_MESSAGE_LENGTH - 3] + "..."

    return error_msg


def log_error(logger: logging.Logger, message: str, error: Exception | None = None) -> None:
    """Log an error, with full details only in debug mode.

    Args:
        logger: The logger instance to use
        message: Generic log message without sensitive data
        error: Optional exception to include
    """
    if error is None:
        logger.error(message)
    elif is_debug_mode():
        logger.error(f"{message}: {error}", exc_info=True)
    else:
        logger.error(f"{message}: {sanitize_exception_message(error)}")


def log_warning(logger: logging.Logger, message: str, error: Exception | None = None) -> None:
    """Log a warning, with full details only in debug mode."""
    if error is None:
        logger.warning(message)
    elif is_debug_mode():
        logger.warning(f"{message}: {error}")
    else:
        logger.warning(f"{message}: {sanitize_exception_message(error)}")
