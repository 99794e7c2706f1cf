from __future__ import annotations

import logging
from typing import Callable, Dict, Generic, TypeVar, Union

from .content_type import ContentType
from .errors import RepresentationError, UnsupportedContentTypeError
from .observability import log_event

log = logging.getLogger("halbuilder.core.registry")

F = TypeVar("F", bound=Callable)


class CodecRegistry(Generic[F]):
    """
    Ordered mapping of ContentType -> codec factory.

    Registering an equal content type again replaces the factory in place
    (last write wins). Lookup walks entries in registration order and returns
    the first one whose key matches the requested content type.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._entries: Dict[ContentType, F] = {}

    def register(self, content_type: Union[str, ContentType], factory: F) -> None:
        if not callable(factory):
            raise RepresentationError(
                f"{self.kind} for {content_type} must be callable, "
                f"got {type(factory).__name__}"
            )
        key = ContentType.parse(content_type)
        self._entries[key] = factory
        log_event(
            "codec_registered",
            logger=log,
            content_type=str(key),
            codec=f"{self.kind}:{getattr(factory, '__name__', repr(factory))}",
        )

    def match(self, content_type: Union[str, ContentType]) -> ContentType:
        """Return the first registered key matching `content_type`."""
        for key in self._entries:
            if key.matches(content_type):
                return key
        raise UnsupportedContentTypeError(str(content_type))

    def lookup(self, content_type: Union[str, ContentType]) -> F:
        return self._entries[self.match(content_type)]

    def __contains__(self, content_type: object) -> bool:
        if not isinstance(content_type, (str, ContentType)):
            return False
        return ContentType.parse(content_type) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CodecRegistry"]
