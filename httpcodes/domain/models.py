"""Typed domain models shared across runtime layers."""

from dataclasses import dataclass
from typing import Final

UNKNOWN_REQUEST_ID: Final[str] = "unknown"


@dataclass(frozen=True)
class RequestContext:
    """Per-request correlation data attached by the tracing middleware.

    Attributes:
        request_id: Identifier echoed in the `X-Request-Id` header and access log.
    """

    request_id: str
