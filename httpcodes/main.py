"""Main module entrypoint for local runtime execution.

This module validates startup configuration, binds the listening socket and
runs the server until a shutdown signal has been drained.
"""

import logging
import signal
from typing import NoReturn

from httpcodes.bootstrap import bootstrap_create_server
from httpcodes.config import SettingsLoadError, config_configure_logging, config_load_settings
from httpcodes.server import BindError, ShutdownTimeoutError, server_bind_socket

logger = logging.getLogger("httpcodes.main")


def main() -> None:
    """Run the status code server.

    Returns:
        None: Returns after a clean drain.

    Raises:
        SystemExit: Raised with status 1 on configuration, bind or drain failure.
    """

    config_configure_logging()
    logger.info("Server is starting...")

    try:
        settings = config_load_settings()
    except SettingsLoadError as error:
        main_fatal("%s", error)
    config_configure_logging(settings.log_level)

    server = bootstrap_create_server(settings)
    try:
        listen_socket = server_bind_socket(settings.host, settings.port)
    except BindError as error:
        main_fatal("%s", error)

    host, port = listen_socket.getsockname()[:2]
    logger.info("Server is ready to handle requests at %s:%s", host, port)
    # uvicorn re-raises captured signals after a completed drain; SIGTERM then
    # surfaces as KeyboardInterrupt like SIGINT instead of killing the process.
    previous_sigterm_handler = signal.signal(signal.SIGTERM, signal.default_int_handler)
    try:
        server.run(sockets=[listen_socket])
    except ShutdownTimeoutError as error:
        main_fatal("Could not gracefully shutdown the server: %s", error)
    except KeyboardInterrupt:
        pass
    finally:
        signal.signal(signal.SIGTERM, previous_sigterm_handler)
        listen_socket.close()


def main_fatal(message: str, *args: object) -> NoReturn:
    """Log a fatal startup or shutdown failure and terminate.

    Args:
        message: Log message format.
        *args: Format arguments.

    Raises:
        SystemExit: Always raised with status 1.
    """

    logger.critical(message, *args)
    raise SystemExit(1)


if __name__ == "__main__":
    main()
