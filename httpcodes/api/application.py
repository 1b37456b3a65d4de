"""FastAPI application factory for the status code server.

This module assembles routers, the request middleware chain and the lifespan
hook that drives the liveness flag.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from starlette.middleware import Middleware

from httpcodes.domain import LivenessFlag

from .middleware import AccessLogMiddleware, RecoveryMiddleware, TracingMiddleware
from .routers import api_create_health_router, api_create_root_router, api_create_status_router


def create_api_application(
    liveness: LivenessFlag,
    request_id_factory: Callable[[], str] | None = None,
    index_document: bytes | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        liveness: Process-wide liveness flag, marked ready on startup.
        request_id_factory: Optional generator for missing request identifiers.
        index_document: Optional landing page override.

    Returns:
        FastAPI: Application with middleware chain and all routes.

    Raises:
        ValueError: Raised when liveness is None.
    """

    if liveness is None:
        raise ValueError("liveness must not be None")

    @asynccontextmanager
    async def api_lifespan(_application: FastAPI) -> AsyncIterator[None]:
        liveness.mark_ready()
        try:
            yield
        finally:
            liveness.mark_draining()

    application = FastAPI(
        title="HTTP Codes",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=api_lifespan,
        middleware=[
            Middleware(RecoveryMiddleware),
            Middleware(TracingMiddleware, request_id_factory=request_id_factory),
            Middleware(AccessLogMiddleware),
        ],
    )

    application.include_router(api_create_root_router(index_document=index_document))
    application.include_router(api_create_status_router())
    application.include_router(api_create_health_router(liveness=liveness))

    return application
