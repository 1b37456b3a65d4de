"""Process logging configuration shared by the server and request middleware."""

import logging
import sys
from typing import Final

LOG_FORMAT: Final[str] = "http: %(asctime)s %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y/%m/%d %H:%M:%S"

_HANDLER_NAME: Final[str] = "httpcodes-stdout"


def config_configure_logging(level: str = "INFO") -> logging.Logger:
    """Route `httpcodes` and uvicorn records to stdout with a shared prefix.

    Calling this more than once replaces the level but never stacks handlers.

    Args:
        level: Standard library level name.

    Returns:
        logging.Logger: The `httpcodes` root logger.
    """

    root_logger = logging.getLogger()
    handler = next((item for item in root_logger.handlers if item.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return logging.getLogger("httpcodes")
