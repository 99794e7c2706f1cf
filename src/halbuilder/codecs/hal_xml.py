from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, TextIO, Tuple
from xml.parsers import expat

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..core.errors import InvalidPropertyError, ParseError, RepresentationError
from ..core.flags import PRETTY_PRINT, STRIP_NULLS
from ..core.link import Link
from ..core.representation import (
    ImmutableRepresentation,
    MutableRepresentation,
    ReadableRepresentation,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..core.factory import RepresentationFactory

RESOURCE = "resource"
LINK = "link"
XMLNS_PREFIX = "xmlns:"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
XSI_NIL = "xsi:nil"

# Unprefixed XML element names; property names become element names.
_ELEMENT_NAME = re.compile(r"[^\W\d][\w.-]*")


def _collect(pairs: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Fold (name, value) pairs into a dict; repeated names become lists."""
    result: Dict[str, Any] = {}
    repeated: set = set()
    for name, value in pairs:
        if name not in result:
            result[name] = value
        elif name in repeated:
            result[name].append(value)
        else:
            result[name] = [result[name], value]
            repeated.add(name)
    return result


def _element_name(name: Any) -> str:
    name = str(name)
    if not _ELEMENT_NAME.fullmatch(name) or name.lower().startswith("xml"):
        raise InvalidPropertyError(
            f"Property name {name!r} is not a valid HAL+XML element name"
        )
    return name


class XmlRenderer:
    """Renders a representation as HAL+XML."""

    def render(self, representation: ReadableRepresentation) -> str:
        flags = representation.get_flags()
        try:
            root = self._element(representation, flags, rel=None)
        except (TypeError, ValueError, PydanticSerializationError) as exc:
            raise RepresentationError(
                f"Could not serialize representation as HAL+XML: {exc}"
            ) from exc

        # Curies declared anywhere in the tree are hoisted onto the root.
        for prefix, uri in representation.collect_namespaces().items():
            root.set(f"{XMLNS_PREFIX}{prefix}", uri)
        if any(XSI_NIL in el.attrib for el in root.iter()):
            root.set(f"{XMLNS_PREFIX}xsi", XSI_NS)
        if PRETTY_PRINT in flags:
            ET.indent(root, space="  ")
        return ET.tostring(root, encoding="unicode")

    def _element(
        self,
        representation: ReadableRepresentation,
        flags: frozenset,
        *,
        rel: Optional[str],
    ) -> ET.Element:
        element = ET.Element(RESOURCE)
        if rel is not None:
            element.set("rel", rel)
        resource_link = representation.get_resource_link()
        if resource_link is not None:
            element.set("href", resource_link.href)

        for link in representation.get_links():
            if link is resource_link:
                continue
            attrs = {"rel": link.rel}
            for key, value in link.to_dict().items():
                attrs[key] = "true" if value is True else str(value)
            ET.SubElement(element, LINK, attrs)

        for name, value in representation.get_properties().items():
            if name in (LINK, RESOURCE):
                raise InvalidPropertyError(
                    f"Property name {name!r} is reserved in HAL+XML"
                )
            if value is None and STRIP_NULLS in flags:
                continue
            self._property(element, name, to_jsonable_python(value))

        for child_rel, children in representation.get_resources().items():
            for child in children:
                element.append(self._element(child, flags, rel=child_rel))

        return element

    def _property(self, parent: ET.Element, name: Any, value: Any) -> None:
        if isinstance(value, list):
            for item in value:
                self._property(parent, name, item)
            return

        node = ET.SubElement(parent, _element_name(name))
        if value is None:
            node.set(XSI_NIL, "true")
        elif isinstance(value, dict):
            for key, item in value.items():
                self._property(node, key, item)
        elif isinstance(value, bool):
            node.text = "true" if value else "false"
        else:
            node.text = str(value)


class XmlRepresentationReader:
    """
    Reads HAL+XML into an ImmutableRepresentation tree.
    Scalar property values come back as strings; xsi:nil elements as None.

    Parsing runs expat without namespace processing: curie URIs are templates
    such as `https://example.com/rels/{rel}`, which a namespace-aware parser
    rejects. Prefixed names stay literal and `xmlns:*` attributes on the root
    become the representation's namespaces.
    """

    def __init__(self, factory: "RepresentationFactory"):
        self.factory = factory

    def read(self, source: TextIO) -> ImmutableRepresentation:
        root = self._parse(source)
        if root.tag != RESOURCE:
            raise ParseError(f"Expected <{RESOURCE}> root element, got {root.tag!r}")

        namespaces = {
            key[len(XMLNS_PREFIX):]: uri
            for key, uri in root.attrib.items()
            if key.startswith(XMLNS_PREFIX) and uri != XSI_NS
        }
        representation = self._read(root, path=f"/{RESOURCE}")
        for prefix, uri in namespaces.items():
            representation.with_namespace(prefix, uri)
        # Factory namespaces act as fallbacks for prefixes the document omits.
        for prefix, uri in self.factory.get_namespaces().items():
            if prefix not in namespaces:
                representation.with_namespace(prefix, uri)
        return representation.to_immutable()

    @staticmethod
    def _parse(source: TextIO) -> ET.Element:
        builder = ET.TreeBuilder()
        parser = expat.ParserCreate()
        parser.StartElementHandler = builder.start
        parser.EndElementHandler = builder.end
        parser.CharacterDataHandler = builder.data
        try:
            parser.Parse(source.read(), True)
        except expat.ExpatError as exc:
            raise ParseError(f"Malformed HAL+XML: {exc}") from exc
        return builder.close()

    def _read(self, element: ET.Element, *, path: str) -> MutableRepresentation:
        representation = MutableRepresentation(self.factory, element.get("href"))
        properties: List[Tuple[str, Any]] = []

        for index, child in enumerate(element):
            if child.tag == LINK:
                link = self._link(child, path)
                representation.with_link(
                    link.rel, link.href, link.name, link.title, link.hreflang
                )
            elif child.tag == RESOURCE:
                rel = child.get("rel")
                if not rel:
                    raise ParseError(f"{path}/{RESOURCE}[{index}] is missing rel")
                representation.with_representation(
                    rel, self._read(child, path=f"{path}/{RESOURCE}[{index}]")
                )
            else:
                properties.append((child.tag, self._value(child)))

        for name, value in _collect(properties).items():
            representation.with_property(name, value)
        return representation

    def _value(self, element: ET.Element) -> Any:
        if element.get(XSI_NIL) == "true":
            return None
        children = list(element)
        if not children:
            return element.text or ""
        return _collect((c.tag, self._value(c)) for c in children)

    @staticmethod
    def _link(element: ET.Element, path: str) -> Link:
        attrs = {k: v for k, v in element.attrib.items() if k != "templated"}
        try:
            return Link.model_validate(attrs)
        except ValidationError as exc:
            raise ParseError(f"Invalid link under {path}: {exc}") from exc


__all__ = ["XmlRenderer", "XmlRepresentationReader"]
