from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, List, Sequence, TextIO

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..core.errors import ParseError, RepresentationError
from ..core.flags import COALESCE_ARRAYS, PRETTY_PRINT, STRIP_NULLS
from ..core.link import Link
from ..core.representation import (
    SELF_REL,
    ImmutableRepresentation,
    MutableRepresentation,
    ReadableRepresentation,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..core.factory import RepresentationFactory

LINKS = "_links"
EMBEDDED = "_embedded"
CURIES = "curies"


def _group_by_rel(links: Sequence[Link]) -> Dict[str, List[Link]]:
    grouped: Dict[str, List[Link]] = {}
    for link in links:
        grouped.setdefault(link.rel, []).append(link)
    return grouped


class JsonRenderer:
    """Renders a representation as HAL+JSON."""

    def render(self, representation: ReadableRepresentation) -> str:
        flags = representation.get_flags()
        indent = 2 if PRETTY_PRINT in flags else None
        try:
            document = self._document(representation, flags, top_level=True)
            return json.dumps(
                document,
                indent=indent,
                ensure_ascii=False,
                default=to_jsonable_python,
            )
        except (TypeError, ValueError, PydanticSerializationError) as exc:
            raise RepresentationError(
                f"Could not serialize representation as HAL+JSON: {exc}"
            ) from exc

    def _document(
        self,
        representation: ReadableRepresentation,
        flags: frozenset,
        *,
        top_level: bool,
    ) -> Dict[str, Any]:
        coalesce = COALESCE_ARRAYS in flags
        document: Dict[str, Any] = {}

        links: Dict[str, Any] = {}
        # Curies declared anywhere in the tree are hoisted onto the root.
        namespaces = representation.collect_namespaces() if top_level else {}
        if namespaces:
            links[CURIES] = [
                Link(rel=CURIES, href=uri, name=prefix).to_dict()
                for prefix, uri in namespaces.items()
            ]
        for rel, group in _group_by_rel(representation.get_links()).items():
            if len(group) == 1 and (rel == SELF_REL or coalesce):
                links[rel] = group[0].to_dict()
            else:
                links[rel] = [link.to_dict() for link in group]
        if links:
            document[LINKS] = links

        for name, value in representation.get_properties().items():
            if value is None and STRIP_NULLS in flags:
                continue
            document[name] = value

        embedded: Dict[str, Any] = {}
        for rel, children in representation.get_resources().items():
            rendered = [
                self._document(child, flags, top_level=False) for child in children
            ]
            embedded[rel] = rendered[0] if coalesce and len(rendered) == 1 else rendered
        if embedded:
            document[EMBEDDED] = embedded

        return document


class JsonRepresentationReader:
    """Reads HAL+JSON into an ImmutableRepresentation tree."""

    def __init__(self, factory: "RepresentationFactory"):
        self.factory = factory

    def read(self, source: TextIO) -> ImmutableRepresentation:
        try:
            document = json.load(source)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Malformed HAL+JSON: {exc}") from exc
        if not isinstance(document, dict):
            raise ParseError(
                f"Expected top-level JSON object, got {type(document).__name__}"
            )

        representation = self._read(document, path="$")
        # Factory namespaces act as fallbacks for prefixes the document omits.
        for prefix, uri in self.factory.get_namespaces().items():
            if prefix not in representation.get_namespaces():
                representation.with_namespace(prefix, uri)
        return representation.to_immutable()

    def _read(self, document: Dict[str, Any], *, path: str) -> MutableRepresentation:
        links = document.get(LINKS, {})
        if not isinstance(links, dict):
            raise ParseError(f"{path}.{LINKS} must be an object")

        representation = MutableRepresentation(self.factory)

        for curie in self._link_objects(links.get(CURIES), path, CURIES):
            prefix, uri = curie.get("name"), curie.get("href")
            if not prefix or not uri:
                raise ParseError(f"{path}.{LINKS}.{CURIES} entries need name and href")
            representation.with_namespace(prefix, uri)

        for rel, value in links.items():
            if rel == CURIES:
                continue
            for obj in self._link_objects(value, path, rel):
                link = self._link(rel, obj, path)
                representation.with_link(
                    link.rel, link.href, link.name, link.title, link.hreflang
                )

        for name, value in document.items():
            if name in (LINKS, EMBEDDED):
                continue
            representation.with_property(name, value)

        embedded = document.get(EMBEDDED, {})
        if not isinstance(embedded, dict):
            raise ParseError(f"{path}.{EMBEDDED} must be an object")
        for rel, value in embedded.items():
            children = value if isinstance(value, list) else [value]
            for index, child in enumerate(children):
                child_path = f"{path}.{EMBEDDED}.{rel}[{index}]"
                if not isinstance(child, dict):
                    raise ParseError(f"{child_path} must be an object")
                representation.with_representation(
                    rel, self._read(child, path=child_path)
                )

        return representation

    @staticmethod
    def _link_objects(value: Any, path: str, rel: str) -> List[Dict[str, Any]]:
        if value is None:
            return []
        objects = value if isinstance(value, list) else [value]
        for obj in objects:
            if not isinstance(obj, dict):
                raise ParseError(f"{path}.{LINKS}.{rel} must hold link objects")
        return objects

    @staticmethod
    def _link(rel: str, obj: Dict[str, Any], path: str) -> Link:
        try:
            return Link.model_validate({**obj, "rel": rel})
        except ValidationError as exc:
            raise ParseError(f"Invalid link at {path}.{LINKS}.{rel}: {exc}") from exc


__all__ = ["JsonRenderer", "JsonRepresentationReader"]
