from __future__ import annotations

import copy
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from .content_type import HAL_JSON, ContentType
from .errors import (
    DuplicateNamespaceError,
    DuplicatePropertyError,
    InvalidEmbeddingError,
    InvalidPropertyError,
)
from .link import Link

if TYPE_CHECKING:  # pragma: no cover
    from .factory import RepresentationFactory

SELF_REL = "self"
# HAL reserves these keys for links and embedded resources.
RESERVED_PROPERTY_NAMES = frozenset({"_links", "_embedded"})


class ReadableRepresentation:
    """
    Read-only surface shared by mutable and immutable representations.

    Accessors return copies or read-only views. Immutable snapshots also hand
    out deep copies of property values, so nested containers cannot leak.
    """

    def __init__(
        self,
        factory: "RepresentationFactory",
        *,
        namespaces: Optional[Mapping[str, str]] = None,
        links: Iterable[Link] = (),
        properties: Optional[Mapping[str, Any]] = None,
        resources: Optional[Mapping[str, Iterable["ImmutableRepresentation"]]] = None,
        flags: Optional[FrozenSet[str]] = None,
    ):
        self._factory = factory
        self._namespaces: Dict[str, str] = dict(namespaces or {})
        self._links: List[Link] = list(links)
        self._properties: Dict[str, Any] = dict(properties or {})
        self._resources: Dict[str, List[ImmutableRepresentation]] = {
            rel: list(children) for rel, children in (resources or {}).items()
        }
        if flags is None:
            flags = factory.get_flags() if factory is not None else frozenset()
        self._flags: FrozenSet[str] = frozenset(flags)

    # --- Links ---------------------------------------------------------------- #

    def get_resource_link(self) -> Optional[Link]:
        return self.get_link_by_rel(SELF_REL)

    @property
    def href(self) -> Optional[str]:
        link = self.get_resource_link()
        return link.href if link else None

    def get_links(self) -> Tuple[Link, ...]:
        return tuple(self._links)

    def get_links_by_rel(self, rel: str) -> Tuple[Link, ...]:
        return tuple(link for link in self._links if link.rel == rel)

    def get_link_by_rel(self, rel: str) -> Optional[Link]:
        return next((link for link in self._links if link.rel == rel), None)

    # --- Namespaces ----------------------------------------------------------- #

    def get_namespaces(self) -> Mapping[str, str]:
        return MappingProxyType(dict(sorted(self._namespaces.items())))

    def resolve_rel(self, rel: str) -> str:
        """
        Expand a curie-style rel (`ns:name`) against the registered namespaces.
        Example: {'ns': 'http://example.com/rels/{rel}'} + 'ns:owner'
                 -> 'http://example.com/rels/owner'
        """
        prefix, sep, name = rel.partition(":")
        if not sep or prefix not in self._namespaces:
            return rel
        uri = self._namespaces[prefix]
        if "{rel}" in uri:
            return uri.replace("{rel}", name)
        return uri + name

    def collect_namespaces(self) -> Mapping[str, str]:
        """
        Namespaces declared on this representation and every embedded one,
        sorted by prefix. The outermost declaration of a prefix wins.
        """
        collected: Dict[str, str] = {}
        pending: List[ReadableRepresentation] = [self]
        while pending:
            current = pending.pop(0)
            for prefix, uri in current._namespaces.items():
                collected.setdefault(prefix, uri)
            for children in current._resources.values():
                pending.extend(children)
        return MappingProxyType(dict(sorted(collected.items())))

    # --- Properties ----------------------------------------------------------- #

    def get_property_names(self) -> Tuple[str, ...]:
        return tuple(self._properties)

    def get_properties(self) -> Mapping[str, Any]:
        return MappingProxyType(self._properties)

    def get_value(self, name: str, default: Any = None) -> Any:
        return self._properties.get(name, default)

    # --- Embedded ------------------------------------------------------------- #

    def get_resources(self) -> Mapping[str, Tuple["ImmutableRepresentation", ...]]:
        return MappingProxyType(
            {rel: tuple(children) for rel, children in self._resources.items()}
        )

    def get_resources_by_rel(self, rel: str) -> Tuple["ImmutableRepresentation", ...]:
        return tuple(self._resources.get(rel, ()))

    # --- Misc ----------------------------------------------------------------- #

    def get_flags(self) -> FrozenSet[str]:
        return self._flags

    @property
    def factory(self) -> "RepresentationFactory":
        return self._factory

    def to_immutable(self) -> "ImmutableRepresentation":
        return ImmutableRepresentation(
            self._factory,
            namespaces=self._namespaces,
            links=self._links,
            properties=copy.deepcopy(self._properties),
            resources=self._resources,
            flags=self._flags,
        )

    def to_string(self, content_type: Union[str, ContentType] = HAL_JSON) -> str:
        """Render through the owning factory's renderer for `content_type`."""
        return self._factory.lookup_renderer(str(content_type)).render(self)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} href={self.href!r} "
            f"links={len(self._links)} properties={len(self._properties)} "
            f"resources={sum(len(c) for c in self._resources.values())}>"
        )


class ImmutableRepresentation(ReadableRepresentation):
    """Snapshot produced by readers and by `MutableRepresentation.to_immutable()`."""

    def get_properties(self) -> Mapping[str, Any]:
        return MappingProxyType(copy.deepcopy(self._properties))

    def get_value(self, name: str, default: Any = None) -> Any:
        return copy.deepcopy(self._properties.get(name, default))

    def to_immutable(self) -> "ImmutableRepresentation":
        return self


ChildBuilder = Callable[["MutableRepresentation"], Any]


class MutableRepresentation(ReadableRepresentation):
    """
    Builder for a single HAL resource. Every `with_*`/`without_*` method
    mutates in place and returns the same instance for chaining.
    """

    def __init__(self, factory: "RepresentationFactory", href: Optional[str] = None):
        super().__init__(factory)
        if href is not None:
            self.with_link(SELF_REL, str(href))

    def with_namespace(self, prefix: str, uri: str) -> "MutableRepresentation":
        if prefix in self._namespaces:
            raise DuplicateNamespaceError(prefix)
        self._namespaces[prefix] = uri
        return self

    def with_link(
        self,
        rel: str,
        href: str,
        name: Optional[str] = None,
        title: Optional[str] = None,
        hreflang: Optional[str] = None,
    ) -> "MutableRepresentation":
        self._links.append(Link.create(rel, href, name, title, hreflang))
        return self

    def with_property(self, name: str, value: Any) -> "MutableRepresentation":
        if name in RESERVED_PROPERTY_NAMES:
            raise InvalidPropertyError(f"Property name '{name}' is reserved by HAL")
        if name in self._properties:
            raise DuplicatePropertyError(name)
        self._properties[name] = value
        return self

    def with_representation(
        self,
        rel: str,
        child: Union[ReadableRepresentation, ChildBuilder],
    ) -> "MutableRepresentation":
        """
        Embed `child` under `rel`. `child` is either a representation (copied
        as an immutable snapshot) or a callable that populates a fresh builder.
        """
        if child is self:
            raise InvalidEmbeddingError(
                f"Cannot embed a representation into itself (rel '{rel}')"
            )
        if isinstance(child, ReadableRepresentation):
            snapshot = child.to_immutable()
        elif callable(child):
            builder = MutableRepresentation(self._factory)
            child(builder)
            snapshot = builder.to_immutable()
        else:
            raise InvalidEmbeddingError(
                f"Embedded resource for rel '{rel}' must be a representation "
                f"or a builder callable, got {type(child).__name__}"
            )
        self._resources.setdefault(rel, []).append(snapshot)
        return self

    def without_property(self, name: str) -> "MutableRepresentation":
        self._properties.pop(name, None)
        return self

    def without_link(
        self, rel: str, href: Optional[str] = None
    ) -> "MutableRepresentation":
        self._links = [
            link
            for link in self._links
            if not (link.rel == rel and (href is None or link.href == href))
        ]
        return self

    def without_representation(self, rel: str) -> "MutableRepresentation":
        self._resources.pop(rel, None)
        return self


__all__ = [
    "ReadableRepresentation",
    "MutableRepresentation",
    "ImmutableRepresentation",
    "SELF_REL",
    "RESERVED_PROPERTY_NAMES",
]
