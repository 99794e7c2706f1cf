from __future__ import annotations

import httpx

from halbuilder.core.factory import RepresentationFactory
from halbuilder.core.representation import ReadableRepresentation

from .negotiation import declared_reader_type


def read_response(
    factory: RepresentationFactory, response: httpx.Response
) -> ReadableRepresentation:
    """
    Read an httpx response body as a representation.
    The declared Content-Type picks the reader when one is registered for it;
    otherwise the body is sniffed. Performs no I/O of its own.
    """
    content_type = declared_reader_type(factory, response.headers.get("content-type"))
    return factory.read_representation(response.content, content_type)


__all__ = ["read_response"]
