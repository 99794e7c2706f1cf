class RepresentationError(Exception):
    """Base error for building, rendering and reading representations."""


class DuplicateNamespaceError(RepresentationError):
    def __init__(self, prefix: str, owner: str = "representation"):
        super().__init__(f"Duplicate namespace '{prefix}' found for {owner}")
        self.prefix = prefix


class DuplicatePropertyError(RepresentationError):
    def __init__(self, name: str):
        super().__init__(f"Duplicate property '{name}' found for representation")
        self.name = name


class InvalidLinkError(RepresentationError):
    pass


class InvalidEmbeddingError(RepresentationError):
    pass


class InvalidPropertyError(RepresentationError):
    pass


class ParseError(RepresentationError):
    pass


class UnsupportedContentTypeError(RepresentationError, ValueError):
    def __init__(self, content_type: str):
        super().__init__(f"Unsupported contentType: {content_type}")
        self.content_type = content_type


__all__ = [
    "RepresentationError",
    "DuplicateNamespaceError",
    "DuplicatePropertyError",
    "InvalidLinkError",
    "InvalidEmbeddingError",
    "InvalidPropertyError",
    "ParseError",
    "UnsupportedContentTypeError",
]
