import json
import xml.etree.ElementTree as ET
from pathlib import Path
from xml.parsers import expat

import pytest
from halbuilder import RepresentationFactory

FIXTURES = Path(__file__).parent / "fixtures"

NS_URI = "https://example.com/rels/{rel}"


def load_fixture_text(name: str) -> str:
    with open(FIXTURES / name, encoding="utf-8") as f:
        return f.read()


def load_fixture(name: str) -> dict:
    return json.loads(load_fixture_text(name))


def parse_xml(text: str) -> ET.Element:
    """Element tree with literal prefixed names; accepts templated curie URIs."""
    builder = ET.TreeBuilder()
    parser = expat.ParserCreate()
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    parser.Parse(text, True)
    return builder.close()


@pytest.fixture
def factory():
    return RepresentationFactory()


@pytest.fixture
def order(factory):
    """Order with one property, one extra link and one embedded item."""
    return (
        factory.new_representation("/orders/523")
        .with_namespace("ns", NS_URI)
        .with_link("ns:customer", "/customers/7", title="Ada Lovelace")
        .with_property("total", 30.0)
        .with_representation(
            "ns:item",
            lambda item: item.with_link("self", "/items/1").with_property("sku", "A-1"),
        )
    )
