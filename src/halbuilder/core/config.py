from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, List, Tuple

from dotenv import load_dotenv

from .flags import FLAG_ALIASES

if TYPE_CHECKING:  # pragma: no cover
    from .factory import RepresentationFactory


@dataclass(frozen=True)
class FactoryConfig:
    """Defaults stamped into every representation a factory creates."""

    namespaces: Tuple[Tuple[str, str], ...] = ()
    links: Tuple[Tuple[str, str], ...] = ()
    flags: FrozenSet[str] = field(default_factory=frozenset)


def _split_csv_env(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def _split_pairs_env(name: str) -> Tuple[Tuple[str, str], ...]:
    """Parse `key=value,key=value` from an environment variable."""
    pairs = []
    for part in _split_csv_env(name):
        key, sep, value = part.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or not value:
            raise ValueError(f"Invalid entry {part!r} in {name}; expected key=value")
        pairs.append((key, value))
    return tuple(pairs)


def load_env_config(*, use_dotenv: bool = True) -> FactoryConfig:
    """Load factory defaults from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    flags = frozenset(
        FLAG_ALIASES.get(flag.lower(), flag)
        for flag in _split_csv_env("HALBUILDER_FLAGS")
    )
    return FactoryConfig(
        namespaces=_split_pairs_env("HALBUILDER_NAMESPACES"),
        links=_split_pairs_env("HALBUILDER_LINKS"),
        flags=flags,
    )


def create_factory_from_env(**kwargs) -> "RepresentationFactory":
    """Create a RepresentationFactory configured from environment variables."""
    from .factory import RepresentationFactory

    return RepresentationFactory.from_config(load_env_config(**kwargs))


__all__ = ["FactoryConfig", "load_env_config", "create_factory_from_env"]
