"""Helper functions for the imgurs package.

This module contains utility functions used across the package: header
validation, and unix timestamp conversion.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Dict, Iterable, Tuple, Union

from .exceptions import HeaderToStrError, InvalidHeaderName, InvalidHeaderValue

# RFC 7230 token characters
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _is_visible_ascii(value: str) -> bool:
    return all(c == "\t" or " " <= c <= "~" for c in value)


def validate_header(name: str, value: str) -> Tuple[str, str]:
    """Check that a header can be sent on the wire.

    Args:
        name: Header name, must be an RFC 7230 token
        value: Header value, tab or visible ASCII only

    Returns:
        The (name, value) pair unchanged

    Raises:
        InvalidHeaderName: If the name contains separators or control bytes
        InvalidHeaderValue: If the value contains control or non-ASCII characters

    Example:
        >>> validate_header("Accept", "application/json")
        ('Accept', 'application/json')
    """
    if not _HEADER_NAME_RE.match(name):
        raise InvalidHeaderName(f"Invalid header name: {name!r}")
    if not _is_visible_ascii(value):
        raise InvalidHeaderValue(f"Invalid value for header {name!r}")
    return name, value


def build_headers(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Validate and collect header pairs into a dict."""
    return dict(validate_header(name, value) for name, value in pairs)


def header_to_str(name: str, value: str) -> str:
    """Return a response header value, refusing non visible ASCII content.

    Raises:
        HeaderToStrError: If the value holds opaque bytes
    """
    if not _is_visible_ascii(value):
        raise HeaderToStrError(f"Header {name!r} is not visible ASCII")
    return value


def to_utc_datetime(value: Union[datetime, int, float]) -> datetime:
    """Normalize a unix timestamp or datetime to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.

    Raises:
        TypeError: If the value is neither a datetime nor a number
        ValueError: If the timestamp is out of the platform range

    Example:
        >>> to_utc_datetime(0)
        datetime.datetime(1970, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, bool):
        raise TypeError("A boolean is not a timestamp")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e
    raise TypeError(f"Expected a datetime or unix timestamp, got {type(value).__name__}")


def to_unix_timestamp(value: datetime) -> int:
    """Convert a datetime to whole seconds since the epoch."""
    return int(to_utc_datetime(value).timestamp())
