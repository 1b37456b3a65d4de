"""Liveness endpoint router driven by the process liveness flag."""

from fastapi import APIRouter, Response, status

from httpcodes.domain import LivenessFlag

from .methods import ROUTE_METHODS


def api_create_health_router(liveness: LivenessFlag) -> APIRouter:
    """Create health-check router reporting process readiness.

    Args:
        liveness: Process-wide liveness flag.

    Returns:
        APIRouter: Router exposing `/healthz` endpoint.

    Raises:
        ValueError: Raised when liveness is None.
    """

    if liveness is None:
        raise ValueError("liveness must not be None")

    router = APIRouter(tags=["health"])

    @router.api_route("/healthz", methods=ROUTE_METHODS)
    def api_health_status() -> Response:
        """Return 204 while serving and 503 once shutdown has begun.

        Returns:
            Response: Empty-bodied probe response.
        """

        if liveness.is_ready():
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return router
