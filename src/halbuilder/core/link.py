from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidLinkError


class Link(BaseModel):
    """
    One hyperlink relation. Immutable and hashable, so links can be shared
    between factories and representations freely.
    """

    rel: str = Field(min_length=1)
    href: str = Field(min_length=1)
    name: Optional[str] = None
    title: Optional[str] = None
    hreflang: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def templated(self) -> bool:
        return "{" in self.href

    @classmethod
    def create(
        cls,
        rel: str,
        href: str,
        name: Optional[str] = None,
        title: Optional[str] = None,
        hreflang: Optional[str] = None,
    ) -> "Link":
        try:
            return cls(rel=rel, href=href, name=name, title=title, hreflang=hreflang)
        except ValidationError as exc:
            raise InvalidLinkError(
                f"Invalid link rel={rel!r} href={href!r}: {exc}"
            ) from exc

    def to_dict(self) -> Dict[str, Any]:
        """HAL link object, without `rel` (the relation is the enclosing key)."""
        data: Dict[str, Any] = {"href": self.href}
        for key in ("name", "title", "hreflang"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.templated:
            data["templated"] = True
        return data


__all__ = ["Link"]
