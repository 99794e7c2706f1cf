"""Core domain surface for halbuilder (transport-agnostic)."""

from .config import FactoryConfig, create_factory_from_env, load_env_config
from .content_type import HAL_JSON, HAL_XML, ContentType
from .errors import (
    DuplicateNamespaceError,
    DuplicatePropertyError,
    InvalidEmbeddingError,
    InvalidLinkError,
    InvalidPropertyError,
    ParseError,
    RepresentationError,
    UnsupportedContentTypeError,
)
from .factory import (
    Renderer,
    RepresentationFactory,
    RepresentationReader,
    sniff_content_type,
)
from .flags import COALESCE_ARRAYS, PRETTY_PRINT, STRIP_NULLS
from .link import Link
from .registry import CodecRegistry
from .representation import (
    ImmutableRepresentation,
    MutableRepresentation,
    ReadableRepresentation,
)

__all__ = [
    # Factory
    "RepresentationFactory",
    "Renderer",
    "RepresentationReader",
    "CodecRegistry",
    "sniff_content_type",
    # Model
    "ContentType",
    "HAL_JSON",
    "HAL_XML",
    "Link",
    "ReadableRepresentation",
    "MutableRepresentation",
    "ImmutableRepresentation",
    # Flags
    "PRETTY_PRINT",
    "STRIP_NULLS",
    "COALESCE_ARRAYS",
    # Exceptions
    "RepresentationError",
    "DuplicateNamespaceError",
    "DuplicatePropertyError",
    "InvalidLinkError",
    "InvalidEmbeddingError",
    "InvalidPropertyError",
    "ParseError",
    "UnsupportedContentTypeError",
    # Config helpers
    "FactoryConfig",
    "load_env_config",
    "create_factory_from_env",
]
