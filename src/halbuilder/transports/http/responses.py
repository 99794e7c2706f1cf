from __future__ import annotations

import logging
from typing import Mapping, Optional

from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from halbuilder.core.content_type import HAL_JSON
from halbuilder.core.errors import RepresentationError, UnsupportedContentTypeError
from halbuilder.core.factory import RepresentationFactory
from halbuilder.core.observability import log_event
from halbuilder.core.representation import ReadableRepresentation

from .negotiation import declared_reader_type, select_content_type

log = logging.getLogger("halbuilder.transports.http")

# Error code strings used in error payloads/tests
ERROR_NOT_ACCEPTABLE = "not_acceptable"
ERROR_INVALID_REPRESENTATION = "invalid_representation"


class HALResponse(Response):
    """Starlette response rendered through the representation's own factory."""

    media_type = HAL_JSON

    def __init__(
        self,
        content: ReadableRepresentation,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
        background: Optional[BackgroundTask] = None,
    ) -> None:
        self.representation = content
        super().__init__(content, status_code, headers, media_type, background)

    def render(self, content: ReadableRepresentation) -> bytes:
        return content.to_string(self.media_type).encode("utf-8")


def negotiated_response(
    request: Request,
    representation: ReadableRepresentation,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> HALResponse:
    """Render `representation` in the best type the request's Accept allows."""
    content_type = select_content_type(
        representation.factory, request.headers.get("accept")
    )
    merged = {"Vary": "Accept", **(headers or {})}
    return HALResponse(
        representation, status_code=status_code, headers=merged, media_type=content_type
    )


async def read_request_representation(
    factory: RepresentationFactory, request: Request
) -> ReadableRepresentation:
    """
    Read the request body as a representation.
    Uses the declared Content-Type when a reader is registered for it,
    otherwise sniffs the body.
    """
    body = await request.body()
    content_type = declared_reader_type(factory, request.headers.get("content-type"))
    return factory.read_representation(body, content_type)


async def representation_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Starlette exception handler: RepresentationError -> JSON error payload."""
    if isinstance(exc, UnsupportedContentTypeError):
        status, code = 406, ERROR_NOT_ACCEPTABLE
    else:
        status, code = 400, ERROR_INVALID_REPRESENTATION
    log_event(
        "http_representation_error",
        logger=log,
        level=logging.INFO,
        status=status,
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse({"error": code, "message": str(exc)}, status_code=status)


EXCEPTION_HANDLERS = {RepresentationError: representation_error_handler}

__all__ = [
    "HALResponse",
    "negotiated_response",
    "read_request_representation",
    "representation_error_handler",
    "EXCEPTION_HANDLERS",
    "ERROR_NOT_ACCEPTABLE",
    "ERROR_INVALID_REPRESENTATION",
]
