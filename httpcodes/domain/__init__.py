"""Domain models and parsing rules shared across runtime layers."""

from .liveness import LivenessFlag
from .models import UNKNOWN_REQUEST_ID, RequestContext
from .status_codes import NO_CONTENT_STATUS, StatusCodeParseError, domain_parse_status_code

__all__ = [
    "LivenessFlag",
    "NO_CONTENT_STATUS",
    "RequestContext",
    "StatusCodeParseError",
    "UNKNOWN_REQUEST_ID",
    "domain_parse_status_code",
]
