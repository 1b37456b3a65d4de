"""Server lifecycle package: socket binding, serving and bounded drain."""

from .lifecycle import (
    IDLE_TIMEOUT_SECONDS,
    READ_TIMEOUT_SECONDS,
    SHUTDOWN_TIMEOUT_SECONDS,
    WRITE_TIMEOUT_SECONDS,
    BindError,
    HTTPCodesServer,
    ShutdownTimeoutError,
    server_bind_socket,
    server_build_config,
)

__all__ = [
    "BindError",
    "HTTPCodesServer",
    "IDLE_TIMEOUT_SECONDS",
    "READ_TIMEOUT_SECONDS",
    "SHUTDOWN_TIMEOUT_SECONDS",
    "ShutdownTimeoutError",
    "WRITE_TIMEOUT_SECONDS",
    "server_bind_socket",
    "server_build_config",
]
