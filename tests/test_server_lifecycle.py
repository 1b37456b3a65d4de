"""Tests for socket binding, uvicorn configuration and graceful shutdown."""
# pylint: disable=duplicate-code

from __future__ import annotations

import asyncio
import signal
import socket
import threading
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

import httpx
import pytest
import uvicorn
from fastapi import FastAPI
from fastapi.testclient import TestClient

from httpcodes.api.application import create_api_application
from httpcodes.config import AppSettings
from httpcodes.domain import LivenessFlag
from httpcodes.server import (
    IDLE_TIMEOUT_SECONDS,
    BindError,
    HTTPCodesServer,
    ShutdownTimeoutError,
    server_bind_socket,
    server_build_config,
)


def _build_settings() -> AppSettings:
    """Create loopback settings with an ephemeral port.

    Returns:
        AppSettings: Deterministic test settings.
    """

    return AppSettings(host="127.0.0.1", port=0, log_level="INFO")


def _build_server(
    liveness: LivenessFlag,
    shutdown_timeout_seconds: float = 30,
) -> HTTPCodesServer:
    """Create a server around a fresh application.

    Args:
        liveness: Flag shared by the application and the server.
        shutdown_timeout_seconds: Drain bound under test.

    Returns:
        HTTPCodesServer: Unstarted server.
    """

    settings = _build_settings()
    application = create_api_application(liveness)
    return HTTPCodesServer(
        config=server_build_config(application, settings),
        liveness=liveness,
        shutdown_timeout_seconds=shutdown_timeout_seconds,
    )


def test_server_bind_socket_listens_on_ephemeral_port() -> None:
    """Bind a listening socket when the address is free."""

    listen_socket = server_bind_socket("127.0.0.1", 0)
    try:
        assert listen_socket.getsockname()[1] > 0
    finally:
        listen_socket.close()


def test_server_bind_socket_raises_bind_error_when_port_is_taken() -> None:
    """Raise BindError with the address when the port is already in use.

    Returns:
        None: Assertions validate the raised error.

    Raises:
        AssertionError: Raised when binding a taken port succeeds.
    """

    occupied_socket = socket.create_server(("127.0.0.1", 0))
    port = occupied_socket.getsockname()[1]
    try:
        with pytest.raises(BindError, match=f"Could not listen on 127.0.0.1:{port}"):
            server_bind_socket("127.0.0.1", port)
    finally:
        occupied_socket.close()


def test_server_build_config_applies_timeouts_and_disables_uvicorn_access_log() -> None:
    """Keep-alive follows the idle timeout and uvicorn leaves logging to the app.

    Returns:
        None: Assertions validate configuration values.

    Raises:
        AssertionError: Raised when configuration values differ.
    """

    settings = _build_settings()
    config = server_build_config(create_api_application(LivenessFlag()), settings)

    assert config.timeout_keep_alive == IDLE_TIMEOUT_SECONDS
    assert config.access_log is False
    assert config.server_header is False
    assert config.log_config is None
    assert config.timeout_graceful_shutdown is None


def test_server_rejects_non_positive_shutdown_timeout() -> None:
    """Refuse a drain bound that could never be met."""

    with pytest.raises(ValueError, match="shutdown_timeout_seconds"):
        _build_server(LivenessFlag(), shutdown_timeout_seconds=0)


def test_server_handle_exit_clears_liveness_before_draining() -> None:
    """Clear the flag and request uvicorn shutdown on an interrupt.

    Returns:
        None: Assertions validate the signal transition.

    Raises:
        AssertionError: Raised when the flag or exit request is not updated.
    """

    liveness = LivenessFlag()
    liveness.mark_ready()
    server = _build_server(liveness)

    server.handle_exit(signal.SIGINT, None)

    assert liveness.is_ready() is False
    assert server.should_exit is True
    assert server.force_exit is False


def test_server_shutdown_raises_timeout_error_when_drain_overruns(monkeypatch: pytest.MonkeyPatch) -> None:
    """Report an overrunning drain instead of returning normally.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate timeout reporting.

    Raises:
        AssertionError: Raised when the timeout is not reported.
    """

    async def _stuck_shutdown(_self, sockets=None) -> None:
        _ = sockets
        await asyncio.sleep(5)

    monkeypatch.setattr(uvicorn.Server, "shutdown", _stuck_shutdown)
    server = _build_server(LivenessFlag(), shutdown_timeout_seconds=0.05)

    with pytest.raises(ShutdownTimeoutError, match="drain timeout"):
        asyncio.run(server.shutdown())


def test_server_shutdown_logs_stop_after_clean_drain(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Log `Server stopped` once uvicorn finishes draining in time.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate the clean stop.

    Raises:
        AssertionError: Raised when the stop is not logged.
    """

    async def _quick_shutdown(_self, sockets=None) -> None:
        _ = sockets

    caplog.set_level("INFO", logger="httpcodes")
    monkeypatch.setattr(uvicorn.Server, "shutdown", _quick_shutdown)
    liveness = LivenessFlag()
    liveness.mark_ready()

    asyncio.run(_build_server(liveness).shutdown())

    assert liveness.is_ready() is False
    assert "Server stopped" in [record.getMessage() for record in caplog.records]


@contextmanager
def _running_server(application: FastAPI, liveness: LivenessFlag) -> Iterator[tuple[HTTPCodesServer, str]]:
    """Run a real uvicorn server for the application on a loopback port.

    Args:
        application: Application to serve.
        liveness: Flag shared by the application and the server.

    Returns:
        Iterator[tuple[HTTPCodesServer, str]]: Started server and its base URL.
    """

    settings = _build_settings()
    listen_socket = server_bind_socket(settings.host, settings.port)
    base_url = f"http://127.0.0.1:{listen_socket.getsockname()[1]}"
    server = HTTPCodesServer(config=server_build_config(application, settings), liveness=liveness)
    server_thread = threading.Thread(target=server.run, kwargs={"sockets": [listen_socket]}, daemon=True)
    server_thread.start()

    deadline = time.monotonic() + 10
    while not server.started and time.monotonic() < deadline:
        time.sleep(0.01)
    assert server.started
    try:
        yield server, base_url
    finally:
        server.should_exit = True
        server_thread.join(timeout=15)
        assert not server_thread.is_alive()


@pytest.mark.parametrize(
    ("path", "expected_body"),
    [("/json/100", b"{}"), ("/json/150", b"{}"), ("/plain/100", b""), ("/plain/103", b"")],
)
def test_server_informational_code_gets_final_ok_on_the_wire(path: str, expected_body: bytes) -> None:
    """Send a complete 200 response for 1xx codes through the real HTTP stack.

    Args:
        path: Request path with an informational code.
        expected_body: Body of the requested variant.

    Returns:
        None: Assertions validate the on-the-wire response.

    Raises:
        AssertionError: Raised when the server closes without a response.
    """

    liveness = LivenessFlag()
    with _running_server(create_api_application(liveness), liveness) as (_server, base_url):
        response = httpx.get(f"{base_url}{path}", timeout=5)
        regular_response = httpx.post(f"{base_url}/json/418", timeout=5)

    assert response.status_code == 200
    assert response.content == expected_body
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-request-id"]
    assert regular_response.status_code == 418
    assert regular_response.content == b"{}"


def test_server_drains_in_flight_request_after_shutdown_signal() -> None:
    """Finish an in-flight request after the signal while refusing new connections.

    Returns:
        None: Assertions validate drain behavior end to end.

    Raises:
        AssertionError: Raised when the request is dropped or the listener stays open.
    """

    liveness = LivenessFlag()
    application = create_api_application(liveness)
    request_entered = threading.Event()
    release_request = threading.Event()

    @application.get("/slow")
    def slow() -> dict[str, str]:
        request_entered.set()
        release_request.wait(timeout=10)
        return {"status": "done"}

    in_process_client = TestClient(application)
    with _running_server(application, liveness) as (server, base_url):
        assert httpx.get(f"{base_url}/healthz").status_code == 204

        with ThreadPoolExecutor(max_workers=1) as executor:
            slow_response_future = executor.submit(httpx.get, f"{base_url}/slow", timeout=15)
            assert request_entered.wait(timeout=10)
            assert in_process_client.get("/healthz").status_code == 204

            server.handle_exit(signal.SIGINT, None)
            draining_health_response = in_process_client.get("/healthz")

            release_request.set()
            slow_response = slow_response_future.result(timeout=15)

    assert draining_health_response.status_code == 503
    assert slow_response.status_code == 200
    assert slow_response.json() == {"status": "done"}
    assert slow_response.headers["x-request-id"]
    with pytest.raises(httpx.ConnectError):
        httpx.get(f"{base_url}/healthz", timeout=2)
