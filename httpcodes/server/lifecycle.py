"""uvicorn-based server lifecycle with liveness-driven graceful shutdown.

States run Starting, Serving, Draining, Stopped. The liveness flag goes false
before uvicorn stops accepting, and the drain of in-flight requests is bounded
by `SHUTDOWN_TIMEOUT_SECONDS`. A drain that overruns is reported as
`ShutdownTimeoutError` instead of silently cancelling the remaining requests.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from types import FrameType
from typing import Final

import uvicorn
from fastapi import FastAPI

from httpcodes.config import AppSettings
from httpcodes.domain import LivenessFlag

# uvicorn exposes no per-request read or write deadline; only the idle timeout is applied.
READ_TIMEOUT_SECONDS: Final[int] = 5
WRITE_TIMEOUT_SECONDS: Final[int] = 10
IDLE_TIMEOUT_SECONDS: Final[int] = 15
SHUTDOWN_TIMEOUT_SECONDS: Final[int] = 30

logger = logging.getLogger(__name__)


class BindError(OSError):
    """Raised when the listening socket cannot be bound."""


class ShutdownTimeoutError(TimeoutError):
    """Raised when in-flight requests do not finish within the drain timeout."""


def server_bind_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on the configured address.

    Args:
        host: Interface to bind.
        port: TCP port, 0 for an ephemeral port.

    Returns:
        socket.socket: Listening socket handed to uvicorn.

    Raises:
        BindError: Raised when the address cannot be bound.
    """

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    try:
        return socket.create_server((host, port), family=family)
    except OSError as error:
        raise BindError(f"Could not listen on {host}:{port}: {error}") from error


def server_build_config(application: FastAPI, settings: AppSettings) -> uvicorn.Config:
    """Build uvicorn configuration for the application.

    The drain timeout is enforced by `HTTPCodesServer.shutdown`, so uvicorn's
    own graceful timeout stays unset.

    Args:
        application: Assembled FastAPI application.
        settings: Validated runtime settings.

    Returns:
        uvicorn.Config: Server configuration.
    """

    return uvicorn.Config(
        application,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_config=None,
        log_level=logging.getLevelNamesMapping()[settings.log_level],
        access_log=False,
        server_header=False,
        timeout_keep_alive=IDLE_TIMEOUT_SECONDS,
        timeout_graceful_shutdown=None,
    )


class HTTPCodesServer(uvicorn.Server):
    """uvicorn server that reports shutdown through the liveness flag."""

    def __init__(
        self,
        config: uvicorn.Config,
        liveness: LivenessFlag,
        shutdown_timeout_seconds: float = SHUTDOWN_TIMEOUT_SECONDS,
    ):
        """Initialize server lifecycle.

        Args:
            config: uvicorn configuration.
            liveness: Process-wide liveness flag cleared on shutdown signal.
            shutdown_timeout_seconds: Upper bound for draining in-flight requests.

        Raises:
            ValueError: Raised when liveness is None or timeout is not positive.
        """

        if liveness is None:
            raise ValueError("liveness must not be None")
        if shutdown_timeout_seconds <= 0:
            raise ValueError("shutdown_timeout_seconds must be positive")
        super().__init__(config)
        self._liveness = liveness
        self._shutdown_timeout_seconds = shutdown_timeout_seconds

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        """Enter draining on an interrupt or termination signal.

        uvicorn then closes the listeners and asks each connection to shut
        down: idle keep-alive connections close at once, busy ones lose
        keep-alive and close after their in-flight response.

        Args:
            sig: Delivered signal number.
            frame: Interrupted stack frame.
        """

        if not self.should_exit:
            logger.info("Server is shutting down...")
        self._liveness.mark_draining()
        super().handle_exit(sig, frame)

    async def shutdown(self, sockets: list[socket.socket] | None = None) -> None:
        """Drain in-flight requests within the shutdown timeout.

        Args:
            sockets: Listening sockets passed to `serve`.

        Raises:
            ShutdownTimeoutError: Raised when draining exceeds the timeout.
        """

        self._liveness.mark_draining()
        try:
            await asyncio.wait_for(super().shutdown(sockets=sockets), timeout=self._shutdown_timeout_seconds)
        except asyncio.TimeoutError as error:
            raise ShutdownTimeoutError(
                f"{len(self.server_state.tasks)} request(s) still running after "
                f"{self._shutdown_timeout_seconds:g}s drain timeout"
            ) from error
        logger.info("Server stopped")
