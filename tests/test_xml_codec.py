import pytest
from conftest import NS_URI, load_fixture_text, parse_xml
from halbuilder import (
    HAL_JSON,
    HAL_XML,
    PRETTY_PRINT,
    STRIP_NULLS,
    InvalidPropertyError,
    ParseError,
)

XSI_NIL = "xsi:nil"


def test_render_layout(order):
    text = order.to_string(HAL_XML)
    assert f'xmlns:ns="{NS_URI}"' in text
    assert "xmlns:xsi" not in text

    root = parse_xml(text)
    assert root.tag == "resource"
    assert root.get("href") == "/orders/523"
    assert [child.tag for child in root] == ["link", "total", "resource"]

    link = root.find("link")
    assert link.attrib == {
        "rel": "ns:customer",
        "href": "/customers/7",
        "title": "Ada Lovelace",
    }
    assert root.findtext("total") == "30.0"

    item = root.find("resource")
    assert item.get("rel") == "ns:item"
    assert item.get("href") == "/items/1"
    assert item.findtext("sku") == "A-1"


def test_render_nested_values(factory):
    rep = (
        factory.new_representation()
        .with_property("shipping", {"city": "Oslo", "zip": "0150"})
        .with_property("tag", ["gift", "express"])
        .with_property("paid", True)
        .with_property("note", None)
        .with_link("search", "/orders{?id}")
    )
    text = rep.to_string(HAL_XML)
    root = parse_xml(text)

    assert root.find("shipping").findtext("city") == "Oslo"
    assert [t.text for t in root.findall("tag")] == ["gift", "express"]
    assert root.findtext("paid") == "true"
    assert root.find("note").get(XSI_NIL) == "true"
    assert root.find("link").get("templated") == "true"


def test_strip_nulls_and_pretty_print(factory):
    factory.with_flag(STRIP_NULLS).with_flag(PRETTY_PRINT)
    rep = factory.new_representation("/a").with_property("note", None).with_property("b", 1)
    text = rep.to_string(HAL_XML)
    assert text == '<resource href="/a">\n  <b>1</b>\n</resource>'


def test_read_fixture(factory):
    rep = factory.read_representation(load_fixture_text("order.xml"))

    assert rep.href == "/orders/523"
    assert dict(rep.get_namespaces()) == {"ns": NS_URI}
    assert rep.get_property_names() == (
        "currency",
        "status",
        "total",
        "note",
        "shipping",
        "tag",
    )
    assert rep.get_value("total") == "30.0"
    assert rep.get_value("note") is None
    assert rep.get_value("shipping") == {"city": "Oslo", "zip": "0150"}
    assert rep.get_value("tag") == ["gift", "express"]

    customer = rep.get_link_by_rel("ns:customer")
    assert customer.title == "Ada Lovelace"
    assert rep.get_link_by_rel("ns:search").templated is True

    items = rep.get_resources()["ns:item"]
    assert [item.href for item in items] == ["/items/1", "/items/2"]
    assert items[1].get_value("sku") == "B-2"


def test_round_trip(factory, order):
    rep = factory.read_representation(order.to_string(HAL_XML))
    assert rep.get_value("total") == "30.0"
    assert rep.get_link_by_rel("ns:customer").href == "/customers/7"
    (item,) = rep.get_resources()["ns:item"]
    assert item.get_value("sku") == "A-1"
    assert rep.to_string(HAL_XML) == order.to_string(HAL_XML)


def test_xml_and_json_agree_on_structure(factory):
    rep = factory.read_representation(load_fixture_text("order.xml"))
    again = factory.read_representation(rep.to_string(HAL_JSON))
    assert again.get_value("shipping") == {"city": "Oslo", "zip": "0150"}
    assert [i.href for i in again.get_resources()["ns:item"]] == ["/items/1", "/items/2"]


def test_empty_leaf_reads_as_empty_string(factory):
    rep = factory.read_representation("<resource><name/></resource>")
    assert rep.get_value("name") == ""
    assert rep.href is None


@pytest.mark.parametrize(
    "text",
    [
        "<resource>",
        "<order/>",
        '<resource><link href="/no-rel"/></resource>',
        '<resource><link rel="next"/></resource>',
        "<resource><resource/></resource>",
    ],
)
def test_malformed_documents_raise_parse_error(factory, text):
    with pytest.raises(ParseError):
        factory.read_representation(text)


def test_reads_templated_namespace_uri(factory):
    rep = factory.read_representation(
        '<resource href="/a" xmlns:ex="https://example.com/{rel}">'
        '<link rel="ex:owner" href="/people/1"/>'
        "</resource>"
    )
    assert dict(rep.get_namespaces()) == {"ex": "https://example.com/{rel}"}
    assert rep.resolve_rel("ex:owner") == "https://example.com/owner"
    assert rep.get_link_by_rel("ex:owner").href == "/people/1"


def test_embedded_namespaces_are_hoisted_to_root(factory):
    rep = factory.new_representation("/a").with_representation(
        "c:part",
        lambda part: part.with_namespace("c", "https://c.example/{rel}")
        .with_link("self", "/parts/1"),
    )
    text = rep.to_string(HAL_XML)
    assert parse_xml(text).get("xmlns:c") == "https://c.example/{rel}"

    again = factory.read_representation(text)
    assert again.resolve_rel("c:x") == "https://c.example/x"
    assert [p.href for p in again.get_resources_by_rel("c:part")] == ["/parts/1"]


@pytest.mark.parametrize("name", ["link", "resource"])
def test_reserved_element_names_are_rejected(factory, name):
    rep = factory.new_representation("/a").with_property(name, "x")
    with pytest.raises(InvalidPropertyError, match=name):
        rep.to_string(HAL_XML)


@pytest.mark.parametrize(
    "value",
    [
        {"first name": "Ada"},
        {"1st": "Ada"},
        {"ok": {"bad<key": 1}},
        {"xmlns": "x"},
    ],
)
def test_invalid_element_names_are_rejected(factory, value):
    rep = factory.new_representation("/a")
    for name, item in value.items():
        rep.with_property(name, item)
    with pytest.raises(InvalidPropertyError):
        rep.to_string(HAL_XML)


def test_multiple_self_links_survive_round_trip(factory):
    rep = factory.new_representation("/a").with_link("self", "/b")
    again = factory.read_representation(rep.to_string(HAL_XML))
    assert again.href == "/a"
    assert [link.href for link in again.get_links_by_rel("self")] == ["/a", "/b"]
