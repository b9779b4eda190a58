"""Input normalization for query parameters and derived identifiers."""

import re

MAX_SEARCH_LENGTH = 200
MAX_STATUS_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Trim a free-text search term.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None when empty
    """
    if search is None:
        return None
    search = search[:max_length].replace(";", "").replace("--", "")
    return search.strip() or None


def sanitize_status(status: str | None, allowed_values: set[str] | None = None) -> str | None:
    """Normalize a status filter, dropping values outside the whitelist.

    The literal ``all`` means no filter.
    """
    if status is None:
        return None
    status = status[:MAX_STATUS_LENGTH].strip().lower()
    if not status or status == "all":
        return None
    if allowed_values and status not in allowed_values:
        return None
    return status


def validate_sort_by(sort_by: str | None, allowed_columns: set[str], default: str) -> str:
    """Validate sort column against whitelist."""
    if sort_by and sort_by in allowed_columns:
        return sort_by
    return default


def escape_like_wildcards(value: str) -> str:
    """Escape SQL LIKE wildcards so they match literally.

    Example:
        >>> escape_like_wildcards("50%_off")
        '50\\\\%\\\\_off'
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def slugify(name: str) -> str:
    """Derive a role slug: lowercase, whitespace runs collapsed to ``-``.

    Example:
        >>> slugify("Live  Streaming Operator")
        'live-streaming-operator'
    """
    return _WHITESPACE.sub("-", name.strip().lower())


def email_local_part(email: str) -> str:
    """Return the part of an address before ``@``, lowercased."""
    return email.split("@", 1)[0].lower()
