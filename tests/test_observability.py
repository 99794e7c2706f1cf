import logging

import pytest
from halbuilder import HAL_JSON, ParseError, RepresentationFactory
from halbuilder.core.logging import LogfmtFormatter, setup_logging
from halbuilder.core.observability import log_event


def test_read_logs_event_with_fields(caplog):
    caplog.set_level(logging.DEBUG, logger="halbuilder.factory")
    factory = RepresentationFactory()
    factory.read_representation('{"a": 1}')

    record = next(r for r in caplog.records if r.getMessage() == "representation_read")
    assert record.content_type == HAL_JSON
    assert record.codec == "JsonRepresentationReader"
    assert record.duration_ms >= 0


def test_configuration_events(caplog):
    caplog.set_level(logging.DEBUG, logger="halbuilder")
    RepresentationFactory().with_namespace("ns", "https://x/").with_flag("urn:x")

    events = {r.getMessage(): r for r in caplog.records}
    assert events["namespace_registered"].prefix == "ns"
    assert events["flag_enabled"].flag == "urn:x"
    assert events["codec_registered"].content_type in (
        "application/hal+json",
        "application/hal+xml",
    )


def test_failures_are_not_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="halbuilder")
    factory = RepresentationFactory()
    caplog.clear()
    with pytest.raises(ParseError):
        factory.read_representation("nope")
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []
    assert not any(r.getMessage() == "representation_read" for r in caplog.records)


def test_log_event_skips_disabled_levels(caplog):
    logger = logging.getLogger("halbuilder.test")
    caplog.set_level(logging.INFO, logger="halbuilder.test")
    log_event("quiet", logger=logger, rel="x")
    log_event("loud", logger=logger, level=logging.INFO, rel="y", msg="dropped")
    assert [r.getMessage() for r in caplog.records] == ["loud"]
    assert caplog.records[0].rel == "y"


def test_logfmt_formatter_renders_extras():
    record = logging.LogRecord(
        "halbuilder.factory", logging.INFO, __file__, 1, "representation_read", None, None
    )
    record.content_type = "application/hal+json"
    record.duration_ms = 3
    record.path = "/orders/1 and more"
    line = LogfmtFormatter().format(record)
    assert line == (
        "level=info logger=halbuilder.factory event=representation_read "
        'content_type=application/hal+json duration_ms=3 path="/orders/1 and more"'
    )


def test_logfmt_formatter_prefers_event_extra_and_joins_sequences():
    record = logging.LogRecord(
        "halbuilder.http", logging.INFO, __file__, 1, "ignored message", None, None
    )
    record.event = "http_representation_error"
    record.flag = frozenset({"urn:b", "urn:a"})
    record.error_type = ""
    line = LogfmtFormatter().format(record)
    assert line == (
        "level=info logger=halbuilder.http event=http_representation_error "
        'flag=urn:a,urn:b error_type=""'
    )


def test_setup_logging_scopes_handler_to_library_logger():
    root = logging.getLogger()
    library = logging.getLogger("halbuilder")
    saved_root = list(root.handlers)
    saved_handlers, saved_level = list(library.handlers), library.level
    try:
        setup_logging("debug")
        setup_logging("warning")
        assert len(library.handlers) == 1
        assert isinstance(library.handlers[0].formatter, LogfmtFormatter)
        assert library.level == logging.WARNING
        assert library.propagate is False
        assert root.handlers == saved_root
    finally:
        library.handlers[:] = saved_handlers
        library.setLevel(saved_level)
        library.propagate = True
