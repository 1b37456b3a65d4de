"""Application bootstrap wiring for startup validation and dependency assembly."""

from httpcodes.api import create_api_application
from httpcodes.config import AppSettings
from httpcodes.domain import LivenessFlag
from httpcodes.server import HTTPCodesServer, server_build_config


def bootstrap_create_server(settings: AppSettings) -> HTTPCodesServer:
    """Assemble the application and its server around one liveness flag.

    Args:
        settings: Validated runtime settings.

    Returns:
        HTTPCodesServer: Server ready to run on a bound socket.
    """

    liveness = LivenessFlag()
    application = create_api_application(liveness=liveness)
    return HTTPCodesServer(config=server_build_config(application, settings), liveness=liveness)
