"""Request body sanitization.

Strips script blocks, ``javascript:`` schemes and inline event handlers from
every string leaf of a request body before it is validated or stored.
"""

import re
from typing import Any

SCRIPT_BLOCK_PATTERN = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
JAVASCRIPT_SCHEME_PATTERN = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER_PATTERN = re.compile(r"on\w+\s*=", re.IGNORECASE)


def sanitize_string(value: str) -> str:
    """Remove executable markup from a single string and trim it.

    Removal repeats until the value is stable so that fragments joined by an
    earlier removal cannot reassemble a pattern.
    """
    previous = None
    while previous != value:
        previous = value
        value = SCRIPT_BLOCK_PATTERN.sub("", value)
        value = JAVASCRIPT_SCHEME_PATTERN.sub("", value)
        value = EVENT_HANDLER_PATTERN.sub("", value)
        value = value.strip()
    return value


def sanitize_payload(data: Any) -> Any:
    """Return a sanitized copy of a request body.

    Mappings and lists are walked recursively and their string leaves are
    cleaned. Any other top-level value is returned as is. The input is never
    mutated and applying the function twice gives the same result as applying
    it once.

    Args:
        data: Decoded JSON body (or any value)

    Returns:
        Sanitized copy
    """
    if isinstance(data, (dict, list)):
        return _sanitize_value(data)
    return data


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _sanitize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_sanitize_value(item) for item in value]
    if isinstance(value, str):
        return sanitize_string(value)
    return value
