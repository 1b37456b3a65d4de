"""Request pipeline middleware: fault recovery, request tracing and access logging.

The application installs them outermost first as recovery, tracing, access log.
Recovery has to see faults from every other stage, tracing has to run before the
access log reads the request identifier, and the access log has to observe the
outcome of the routed handler.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from httpcodes.domain import UNKNOWN_REQUEST_ID, RequestContext

from .context import api_request_context_attach, api_request_context_get

REQUEST_ID_HEADER = "X-Request-Id"

logger = logging.getLogger(__name__)


def api_next_request_id() -> str:
    """Generate a request identifier from the monotonic nanosecond clock.

    Returns:
        str: Decimal nanosecond reading.
    """

    return str(time.monotonic_ns())


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Convert any unhandled fault from inner stages into an empty 500 response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.error("%s", error)
            response = Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
            context = api_request_context_get(request)
            if context is not None:
                response.headers[REQUEST_ID_HEADER] = context.request_id
            return response


class TracingMiddleware(BaseHTTPMiddleware):
    """Propagate or generate `X-Request-Id` for every request."""

    def __init__(self, app: ASGIApp, request_id_factory: Callable[[], str] | None = None):
        """Initialize tracing middleware.

        Args:
            app: Downstream ASGI application.
            request_id_factory: Generator used when the request carries no identifier.
        """

        super().__init__(app)
        self._request_id_factory = request_id_factory or api_next_request_id

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER, "")
        if not request_id:
            request_id = self._request_id_factory()

        api_request_context_attach(request, RequestContext(request_id=request_id))
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Write one access-log line per request once the routed handler finishes."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        finally:
            context = api_request_context_get(request)
            request_id = context.request_id if context is not None else UNKNOWN_REQUEST_ID
            logger.info(
                "%s %s %s %s %s",
                request_id,
                request.method,
                request.url.path,
                api_format_remote_address(request),
                request.headers.get("user-agent", ""),
            )


def api_format_remote_address(request: Request) -> str:
    """Render the peer address as `host:port`.

    Args:
        request: Inbound request.

    Returns:
        str: Peer address, or `-` when the server did not report one.
    """

    if request.client is None:
        return "-"
    return f"{request.client.host}:{request.client.port}"
