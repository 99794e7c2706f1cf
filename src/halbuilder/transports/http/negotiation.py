from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from halbuilder.core.content_type import HAL_JSON
from halbuilder.core.errors import UnsupportedContentTypeError

if TYPE_CHECKING:  # pragma: no cover
    from halbuilder.core.factory import RepresentationFactory


def parse_accept(header_value: str | None) -> List[str]:
    """
    Return media ranges from an Accept header, highest q first.
    Ties keep header order; q=0 ranges are dropped.
    """
    if not header_value or not header_value.strip():
        return []

    ranked: List[Tuple[float, int, str]] = []
    for index, part in enumerate(header_value.split(",")):
        media_range, *params = [p.strip() for p in part.split(";")]
        if not media_range:
            continue
        q = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() != "q":
                continue
            try:
                q = float(value)
            except ValueError:
                q = 0.0
        if q <= 0:
            continue
        ranked.append((-q, index, media_range))
    return [media_range for _, _, media_range in sorted(ranked)]


def select_content_type(
    factory: "RepresentationFactory", accept: str | None
) -> str:
    """
    Pick the registered renderer content type for an Accept header.
    - Missing/blank header -> HAL+JSON
    - Otherwise the first acceptable range with a matching renderer wins
    - Raises UnsupportedContentTypeError when nothing matches
    """
    if not accept or not accept.strip():
        return factory.renderer_content_type(HAL_JSON)

    for media_range in parse_accept(accept):
        try:
            return factory.renderer_content_type(media_range)
        except UnsupportedContentTypeError:
            continue
    raise UnsupportedContentTypeError(accept)


def declared_reader_type(
    factory: "RepresentationFactory", declared: str | None
) -> Optional[str]:
    """Registered reader type for a declared Content-Type, or None to sniff."""
    if not declared:
        return None
    try:
        return factory.reader_content_type(declared)
    except UnsupportedContentTypeError:
        return None


__all__ = ["parse_accept", "select_content_type", "declared_reader_type"]
