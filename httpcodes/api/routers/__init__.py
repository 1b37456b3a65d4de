"""API router package for endpoint composition."""

from .health import api_create_health_router
from .root import api_create_root_router
from .status import api_create_status_router

__all__ = ["api_create_health_router", "api_create_root_router", "api_create_status_router"]
