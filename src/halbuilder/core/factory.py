from __future__ import annotations

import io
import logging
import time
from typing import (
    IO,
    Callable,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Protocol,
    Set,
    TextIO,
    Tuple,
    Union,
    runtime_checkable,
)

from ..codecs.hal_json import JsonRenderer, JsonRepresentationReader
from ..codecs.hal_xml import XmlRenderer, XmlRepresentationReader
from .config import FactoryConfig
from .content_type import HAL_JSON, HAL_XML, ContentType
from .errors import DuplicateNamespaceError, ParseError, RepresentationError
from .link import Link
from .observability import log_event
from .registry import CodecRegistry
from .representation import MutableRepresentation, ReadableRepresentation


@runtime_checkable
class Renderer(Protocol):
    """Serializes a representation for one content type."""

    def render(self, representation: ReadableRepresentation) -> str: ...


@runtime_checkable
class RepresentationReader(Protocol):
    """Parses a full document into a read-only representation tree."""

    def read(self, source: TextIO) -> ReadableRepresentation: ...


RendererFactory = Callable[[], Renderer]
ReaderFactory = Callable[["RepresentationFactory"], RepresentationReader]

Source = Union[str, bytes, IO[str], IO[bytes]]

# First non-whitespace character -> content type of the reader to use.
SNIFF_TABLE: Dict[str, str] = {"{": HAL_JSON, "<": HAL_XML}


def _read_source(source: Source) -> str:
    """Drain `source` into text. Caller-owned streams are read, never closed."""
    data = source if isinstance(source, (str, bytes)) else source.read()
    if isinstance(data, bytes):
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Input is not valid UTF-8: {exc}") from exc
    if not isinstance(data, str):
        raise RepresentationError(
            f"Cannot read representation from {type(data).__name__}"
        )
    return data


def sniff_content_type(text: str) -> str:
    """Pick a reader content type from the first non-whitespace character."""
    stripped = text.lstrip()
    first = stripped[:1]
    try:
        return SNIFF_TABLE[first]
    except KeyError:
        shown = repr(first) if first else "EOF"
        raise ParseError(
            f"unrecognized initial character in stream: {shown}"
        ) from None


class RepresentationFactory:
    """
    Entry point for building and reading HAL representations.

    - Holds default namespaces/links/flags seeded into every new representation
    - Owns per-instance renderer and reader registries (HAL+JSON, HAL+XML built in)
    - Configure once, then treat as read-only; mutation is not thread-safe
    """

    def __init__(self, *, logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger("halbuilder.factory")
        self._namespaces: Dict[str, str] = {}
        self._links: List[Link] = []
        self._flags: Set[str] = set()

        self._renderers: CodecRegistry[RendererFactory] = CodecRegistry("renderer")
        self._readers: CodecRegistry[ReaderFactory] = CodecRegistry("reader")
        self._renderers.register(HAL_JSON, JsonRenderer)
        self._renderers.register(HAL_XML, XmlRenderer)
        self._readers.register(HAL_JSON, JsonRepresentationReader)
        self._readers.register(HAL_XML, XmlRepresentationReader)

    @classmethod
    def from_config(cls, config: FactoryConfig, **kwargs) -> "RepresentationFactory":
        factory = cls(**kwargs)
        for prefix, uri in config.namespaces:
            factory.with_namespace(prefix, uri)
        for rel, href in config.links:
            factory.with_link(rel, href)
        for flag in sorted(config.flags):
            factory.with_flag(flag)
        return factory

    # --- Configuration -------------------------------------------------------- #

    def with_namespace(self, prefix: str, uri: str) -> "RepresentationFactory":
        if prefix in self._namespaces:
            raise DuplicateNamespaceError(prefix, owner="representation factory")
        self._namespaces[prefix] = uri
        log_event("namespace_registered", logger=self.log, prefix=prefix)
        return self

    def with_link(self, rel: str, href: str) -> "RepresentationFactory":
        self._links.append(Link.create(rel, href))
        log_event("link_registered", logger=self.log, rel=rel)
        return self

    def with_flag(self, flag: str) -> "RepresentationFactory":
        self._flags.add(str(flag))
        log_event("flag_enabled", logger=self.log, flag=str(flag))
        return self

    def with_renderer(
        self, content_type: Union[str, ContentType], renderer_factory: RendererFactory
    ) -> "RepresentationFactory":
        self._renderers.register(content_type, renderer_factory)
        return self

    def with_reader(
        self, content_type: Union[str, ContentType], reader_factory: ReaderFactory
    ) -> "RepresentationFactory":
        self._readers.register(content_type, reader_factory)
        return self

    def get_flags(self) -> FrozenSet[str]:
        return frozenset(self._flags)

    def get_namespaces(self) -> Mapping[str, str]:
        return dict(sorted(self._namespaces.items()))

    def get_links(self) -> Tuple[Link, ...]:
        return tuple(self._links)

    # --- Building ------------------------------------------------------------- #

    def new_representation(self, href: Optional[str] = None) -> MutableRepresentation:
        representation = MutableRepresentation(self, href)

        for prefix, uri in sorted(self._namespaces.items()):
            representation.with_namespace(prefix, uri)

        for link in self._links:
            representation.with_link(
                link.rel, link.href, link.name, link.title, link.hreflang
            )

        return representation

    # --- Codec dispatch ------------------------------------------------------- #

    def renderer_content_type(self, content_type: Union[str, ContentType]) -> str:
        """Registered content type `lookup_renderer(content_type)` would use."""
        return str(self._renderers.match(content_type))

    def reader_content_type(self, content_type: Union[str, ContentType]) -> str:
        """Registered content type `lookup_reader(content_type)` would use."""
        return str(self._readers.match(content_type))

    def lookup_renderer(self, content_type: Union[str, ContentType]) -> Renderer:
        renderer_factory = self._renderers.lookup(content_type)
        try:
            renderer = renderer_factory()
        except Exception as exc:
            raise RepresentationError(
                f"Could not create renderer for {content_type}: {exc}"
            ) from exc
        log_event(
            "renderer_resolved",
            logger=self.log,
            content_type=str(content_type),
            codec=type(renderer).__name__,
        )
        return renderer

    def lookup_reader(
        self, content_type: Union[str, ContentType]
    ) -> RepresentationReader:
        reader_factory = self._readers.lookup(content_type)
        try:
            return reader_factory(self)
        except Exception as exc:
            raise RepresentationError(
                f"Could not create reader for {content_type}: {exc}"
            ) from exc

    def read_representation(
        self,
        source: Source,
        content_type: Union[str, ContentType, None] = None,
    ) -> ReadableRepresentation:
        """
        Parse `source` into a read-only representation.

        Uses the reader for `content_type` when given, otherwise sniffs the
        first non-whitespace character: '{' -> HAL+JSON, '<' -> HAL+XML.
        Every failure surfaces as RepresentationError (ParseError for bad input).
        """
        start = time.perf_counter()
        try:
            text = _read_source(source)
            selected = content_type if content_type is not None else sniff_content_type(text)
            reader = self.lookup_reader(selected)
            with io.StringIO(text) as buffer:
                representation = reader.read(buffer)
        except RepresentationError:
            raise
        except Exception as exc:
            raise RepresentationError(f"Failed to read representation: {exc}") from exc

        log_event(
            "representation_read",
            logger=self.log,
            content_type=str(selected),
            codec=type(reader).__name__,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        return representation


__all__ = [
    "RepresentationFactory",
    "Renderer",
    "RepresentationReader",
    "RendererFactory",
    "ReaderFactory",
    "sniff_content_type",
]
