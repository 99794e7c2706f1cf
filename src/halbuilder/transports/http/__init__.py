"""HTTP glue: content negotiation, Starlette responses and httpx helpers."""

from .client import read_response
from .negotiation import declared_reader_type, parse_accept, select_content_type
from .responses import (
    EXCEPTION_HANDLERS,
    HALResponse,
    negotiated_response,
    read_request_representation,
    representation_error_handler,
)

__all__ = [
    "parse_accept",
    "select_content_type",
    "declared_reader_type",
    "HALResponse",
    "negotiated_response",
    "read_request_representation",
    "representation_error_handler",
    "EXCEPTION_HANDLERS",
    "read_response",
]
