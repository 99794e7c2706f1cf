"""halbuilder package exports."""

from .core import (
    COALESCE_ARRAYS,
    HAL_JSON,
    HAL_XML,
    PRETTY_PRINT,
    STRIP_NULLS,
    ContentType,
    DuplicateNamespaceError,
    DuplicatePropertyError,
    FactoryConfig,
    ImmutableRepresentation,
    InvalidEmbeddingError,
    InvalidLinkError,
    InvalidPropertyError,
    Link,
    MutableRepresentation,
    ParseError,
    ReadableRepresentation,
    Renderer,
    RepresentationError,
    RepresentationFactory,
    RepresentationReader,
    UnsupportedContentTypeError,
    create_factory_from_env,
    load_env_config,
)
from .core.logging import setup_logging

__all__ = [
    # Factory
    "RepresentationFactory",
    "Renderer",
    "RepresentationReader",
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
    # Config / logging
    "FactoryConfig",
    "load_env_config",
    "create_factory_from_env",
    "setup_logging",
]
