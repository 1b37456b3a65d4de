"""HTTP methods every route answers, so clients can probe with any verb."""

from typing import Final

ROUTE_METHODS: Final[list[str]] = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]
