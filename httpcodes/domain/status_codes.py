"""Parsing rules for status codes embedded in request paths."""

from __future__ import annotations

import re
from typing import Final

NO_CONTENT_STATUS: Final[int] = 204

_MIN_WRITABLE_STATUS: Final[int] = 100
_MAX_WRITABLE_STATUS: Final[int] = 999
_DECIMAL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+", flags=re.ASCII)


class StatusCodeParseError(ValueError):
    """Raised when a path segment cannot be used as a response status code.

    Attributes:
        raw_value: Path segment exactly as received.
    """

    def __init__(self, message: str, raw_value: str):
        super().__init__(message)
        self.raw_value = raw_value


def domain_parse_status_code(raw_value: str) -> int:
    """Parse a signed base-10 status code from a path segment.

    Args:
        raw_value: Path segment text, for example `404` or `+200`.

    Returns:
        int: Status code in the writable range 100..999.

    Raises:
        StatusCodeParseError: Raised when the segment is not a plain decimal
            integer or cannot be written as a status line.
    """

    if _DECIMAL_PATTERN.fullmatch(raw_value) is None:
        raise StatusCodeParseError(
            f"Unable to process code: invalid syntax in {raw_value!r}",
            raw_value=raw_value,
        )

    status_code = int(raw_value)
    if not _MIN_WRITABLE_STATUS <= status_code <= _MAX_WRITABLE_STATUS:
        raise StatusCodeParseError(
            f"Unable to process code: {status_code} is outside "
            f"{_MIN_WRITABLE_STATUS}..{_MAX_WRITABLE_STATUS}",
            raw_value=raw_value,
        )
    return status_code
