from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Union

HAL_JSON = "application/hal+json"
HAL_XML = "application/hal+xml"

WILDCARD = "*"


def _split(value: str) -> tuple[str, str] | None:
    """Return the lower-cased (type, subtype) of a MIME string, or None if malformed."""
    base = value.split(";", 1)[0].strip().lower()
    if base == WILDCARD:
        return WILDCARD, WILDCARD
    if base.count("/") != 1:
        return None
    main, sub = (part.strip() for part in base.split("/"))
    if not main or not sub:
        return None
    return main, sub


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class ContentType:
    """
    MIME identifier used as a codec registry key.

    Equality ignores parameters and case; `matches` additionally tolerates
    wildcards (`*/*`, `type/*`) on either side.
    """

    value: str
    _parts: tuple[str, str] | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", (self.value or "").strip())
        object.__setattr__(self, "_parts", _split(self.value))

    @classmethod
    def parse(cls, value: Union[str, "ContentType"]) -> "ContentType":
        if isinstance(value, ContentType):
            return value
        return cls(value)

    @property
    def base(self) -> str:
        if self._parts is None:
            return self.value
        return f"{self._parts[0]}/{self._parts[1]}"

    @property
    def is_valid(self) -> bool:
        return self._parts is not None

    def matches(self, candidate: Union[str, "ContentType"]) -> bool:
        other = ContentType.parse(candidate)
        if self._parts is None or other._parts is None:
            return False
        (main, sub), (o_main, o_sub) = self._parts, other._parts
        if WILDCARD in (main, o_main):
            return True
        if main != o_main:
            return False
        return WILDCARD in (sub, o_sub) or sub == o_sub

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentType):
            return NotImplemented
        return self.base == other.base

    def __hash__(self) -> int:
        return hash(self.base)

    def __lt__(self, other: "ContentType") -> bool:
        if not isinstance(other, ContentType):
            return NotImplemented
        return str(self) < str(other)

    def __str__(self) -> str:
        return self.base


__all__ = ["ContentType", "HAL_JSON", "HAL_XML"]
