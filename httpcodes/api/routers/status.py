"""Status code endpoints answering with the status requested in the path.

Parse failures are deliberately left unhandled here. `StatusCodeParseError`
propagates to the recovery middleware, which answers with a generic 500.
"""

from typing import Final

from fastapi import APIRouter, Response

from httpcodes.domain import NO_CONTENT_STATUS, domain_parse_status_code

from .methods import ROUTE_METHODS

JSON_CONTENT_TYPE: Final[str] = "application/json; charset=utf-8"
PLAIN_CONTENT_TYPE: Final[str] = "text/plain; charset=utf-8"
EMPTY_JSON_BODY: Final[bytes] = b"{}"

_NOT_MODIFIED_STATUS: Final[int] = 304
_INFORMATIONAL_FINAL_STATUS: Final[int] = 200


def api_build_status_response(status_code: int, content_type: str, body: bytes) -> Response:
    """Build a response carrying the requested status code.

    An informational 1xx status cannot end an exchange, so it is sent as a final
    200 with the same headers and body, which is what a client sees from a
    server that emits the 1xx interim line before completing the response.

    Args:
        status_code: Parsed status code.
        content_type: Value for the `Content-Type` header.
        body: Payload written unless the status is 204 or 304.

    Returns:
        Response: Response with `Content-Type` and `X-Content-Type-Options` set.
    """

    headers = {
        "Content-Type": content_type,
        "X-Content-Type-Options": "nosniff",
    }
    if status_code < 200:
        status_code = _INFORMATIONAL_FINAL_STATUS
    if status_code in (NO_CONTENT_STATUS, _NOT_MODIFIED_STATUS):
        return Response(status_code=status_code, headers=headers)
    return Response(content=body, status_code=status_code, headers=headers)


def api_create_status_router() -> APIRouter:
    """Create router exposing `/json/{code}` and `/plain/{code}`.

    Returns:
        APIRouter: Router with both status code endpoints.
    """

    router = APIRouter(tags=["status"])

    @router.api_route("/json/{code}", methods=ROUTE_METHODS)
    def api_status_json(code: str) -> Response:
        """Answer with the requested status and a `{}` body.

        Args:
            code: Raw path segment holding the status code.

        Returns:
            Response: JSON response, bodyless for 204.

        Raises:
            StatusCodeParseError: Raised when `code` is not a usable status.
        """

        status_code = domain_parse_status_code(code)
        return api_build_status_response(status_code, JSON_CONTENT_TYPE, EMPTY_JSON_BODY)

    @router.api_route("/plain/{code}", methods=ROUTE_METHODS)
    def api_status_plain(code: str) -> Response:
        """Answer with the requested status and an empty plain-text body.

        Args:
            code: Raw path segment holding the status code.

        Returns:
            Response: Plain-text response that never carries a body.

        Raises:
            StatusCodeParseError: Raised when `code` is not a usable status.
        """

        status_code = domain_parse_status_code(code)
        return api_build_status_response(status_code, PLAIN_CONTENT_TYPE, b"")

    return router
