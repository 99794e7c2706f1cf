"""Bundled HAL+JSON and HAL+XML codecs."""

from .hal_json import JsonRenderer, JsonRepresentationReader
from .hal_xml import XmlRenderer, XmlRepresentationReader

__all__ = [
    "JsonRenderer",
    "JsonRepresentationReader",
    "XmlRenderer",
    "XmlRepresentationReader",
]
