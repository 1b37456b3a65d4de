"""Typed access to the per-request context shared along the middleware chain."""

from __future__ import annotations

from starlette.requests import Request

from httpcodes.domain import RequestContext

_CONTEXT_STATE_ATTRIBUTE = "request_context"


def api_request_context_attach(request: Request, context: RequestContext) -> None:
    """Attach context so downstream middleware and handlers can read it.

    Request state lives in the ASGI scope, so every stage that wraps the same
    scope observes the attached value.

    Args:
        request: Inbound request.
        context: Context built by the tracing stage.
    """

    setattr(request.state, _CONTEXT_STATE_ATTRIBUTE, context)


def api_request_context_get(request: Request) -> RequestContext | None:
    """Return the context attached to a request, if any.

    Args:
        request: Inbound request.

    Returns:
        RequestContext | None: Attached context, or None before tracing ran.
    """

    context = getattr(request.state, _CONTEXT_STATE_ATTRIBUTE, None)
    if isinstance(context, RequestContext):
        return context
    return None
