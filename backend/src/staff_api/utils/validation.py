"""Input validation utilities for query parameters."""

from staff_api.constants.validation import MAX_SEARCH_LENGTH


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Sanitize search input.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None
    """
    if search is None:
        return None

    search = search[:max_length]

    # Parameterized anyway; stripped so they never reach a LIKE pattern
    search = search.replace(";", "").replace("--", "")

    return search.strip() or None


def validate_sort_by(sort_by: str | None, allowed_columns: dict[str, str], default: str) -> str:
    """Map a public sort key to a column name through a whitelist.

    Args:
        sort_by: Raw sort key
        allowed_columns: Mapping of public sort keys to column names
        default: Public key used when ``sort_by`` is not whitelisted

    Returns:
        Column name to sort by
    """
    if sort_by and sort_by in allowed_columns:
        return allowed_columns[sort_by]
    return allowed_columns[default]


def validate_against_whitelist(
    value: str | None,
    allowed_values: set[str] | tuple[str, ...],
    max_length: int = 50,
) -> str | None:
    """Validate a string value against a whitelist of allowed values.

    Args:
        value: Raw string value
        allowed_values: Allowed values
        max_length: Maximum allowed length

    Returns:
        Validated value or None if invalid
    """
    if value is None:
        return None

    value = value[:max_length].strip()

    if not value or value not in allowed_values:
        return None

    return value


def escape_like_wildcards(value: str) -> str:
    """Escape SQL LIKE wildcards so they match literally.

    Example:
        >>> escape_like_wildcards("test%value")
        'test\\\\%value'
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
