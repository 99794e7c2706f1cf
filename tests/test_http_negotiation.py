import pytest
from halbuilder import HAL_JSON, HAL_XML, UnsupportedContentTypeError
from halbuilder.transports.http import (
    declared_reader_type,
    parse_accept,
    select_content_type,
)


def test_parse_accept_orders_by_q_and_keeps_ties_stable():
    header = "text/html;q=0.5, application/hal+xml, application/hal+json;q=0.9, */*;q=0.1"
    assert parse_accept(header) == [
        "application/hal+xml",
        "application/hal+json",
        "text/html",
        "*/*",
    ]


@pytest.mark.parametrize("header", [None, "", "   "])
def test_parse_accept_blank(header):
    assert parse_accept(header) == []


def test_parse_accept_drops_q_zero_and_bad_q():
    assert parse_accept("application/hal+xml;q=0, application/hal+json;q=abc, text/plain") == [
        "text/plain"
    ]


@pytest.mark.parametrize(
    "accept,expected",
    [
        (None, HAL_JSON),
        ("", HAL_JSON),
        ("*/*", HAL_JSON),
        ("application/*", HAL_JSON),
        ("application/hal+xml", HAL_XML),
        ("text/html, application/hal+xml;q=0.8, application/hal+json;q=0.5", HAL_XML),
        ("application/hal+json; charset=utf-8", HAL_JSON),
    ],
)
def test_select_content_type(factory, accept, expected):
    assert select_content_type(factory, accept) == expected


def test_select_content_type_without_match(factory):
    with pytest.raises(UnsupportedContentTypeError):
        select_content_type(factory, "text/html, text/csv")
    with pytest.raises(UnsupportedContentTypeError):
        select_content_type(factory, "application/hal+json;q=0")


def test_declared_reader_type(factory):
    assert declared_reader_type(factory, "application/hal+xml; charset=utf-8") == HAL_XML
    assert declared_reader_type(factory, "application/json") is None
    assert declared_reader_type(factory, None) is None
