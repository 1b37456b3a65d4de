"""Root document router serving the packaged landing page."""

from pathlib import Path
from typing import Final

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from .methods import ROUTE_METHODS

INDEX_DOCUMENT_PATH: Final[Path] = Path(__file__).resolve().parent.parent / "static" / "index.html"


def api_load_index_document(path: Path = INDEX_DOCUMENT_PATH) -> bytes:
    """Read the landing page once so every response reuses the same bytes.

    Args:
        path: Location of the HTML document.

    Returns:
        bytes: Raw document content.

    Raises:
        OSError: Raised when the document cannot be read.
    """

    return path.read_bytes()


def api_create_root_router(index_document: bytes | None = None) -> APIRouter:
    """Create router exposing the fixed landing page at `/`.

    Args:
        index_document: Preloaded document bytes; the packaged page when omitted.

    Returns:
        APIRouter: Router exposing `/` endpoint.
    """

    document = api_load_index_document() if index_document is None else index_document
    router = APIRouter(tags=["root"])

    @router.api_route("/", methods=ROUTE_METHODS, response_class=HTMLResponse)
    def api_root_document() -> HTMLResponse:
        """Return the landing page.

        Returns:
            HTMLResponse: Identical document on every call.
        """

        return HTMLResponse(content=document)

    return router
