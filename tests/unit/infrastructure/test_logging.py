"""Tests for logging setup, the logging adapter and wire sinks."""

import json
import logging
from unittest.mock import Mock

import pytest

from infrastructure.adapters.logging_adapter import LoggingAdapter
from infrastructure.logging.logger import ROOT_LOGGER_NAME, get_logger, setup_logging
from infrastructure.logging.wire import INBOUND, OUTBOUND, SignatureWire, WireLogger


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    root.propagate = True


@pytest.mark.unit
class TestSetupLogging:
    """Test structlog-backed log rendering."""

    def test_json_file_output_includes_bound_context(self, tmp_path, restore_root_logger):
        setup_logging(
            log_level="DEBUG",
            log_destination="file",
            log_dir=str(tmp_path),
            log_filename="test.log",
            json_output=True,
        )

        LoggingAdapter("dispatcher").bind(command_id="c1").info("sent %s", "GET /")
        for handler in restore_root_logger.handlers:
            handler.flush()

        record = json.loads((tmp_path / "test.log").read_text().strip().splitlines()[-1])
        assert record["event"] == "sent GET /"
        assert record["command_id"] == "c1"
        assert record["level"] == "info"
        assert record["logger"] == "cloudwire.dispatcher"

    def test_repeated_setup_replaces_handlers(self, tmp_path, restore_root_logger):
        for _ in range(3):
            setup_logging(log_destination="stdout", log_dir=str(tmp_path))

        marked = [h for h in restore_root_logger.handlers if getattr(h, "_cloudwire_handler", False)]
        assert len(marked) == 1

    def test_get_logger_namespaces_names(self):
        assert get_logger("wire").name == "cloudwire.wire"
        assert get_logger("cloudwire.transport").name == "cloudwire.transport"


@pytest.mark.unit
class TestLoggingAdapter:
    """Test the LoggingPort adapter."""

    def test_forwards_with_stacklevel_and_context(self):
        logger = Mock()
        adapter = LoggingAdapter(logger=logger, context={"provider": "s3"})

        adapter.warning("status %d", 503, extra={"attempt": 1})

        logger.warning.assert_called_once_with(
            "status %d", 503, stacklevel=2, extra={"provider": "s3", "attempt": 1}
        )

    def test_bind_does_not_mutate_parent(self):
        logger = Mock()
        parent = LoggingAdapter(logger=logger)

        parent.bind(command_id="c1")
        parent.debug("plain")

        logger.debug.assert_called_once_with("plain", stacklevel=2)


@pytest.mark.unit
class TestWireLogger:
    """Test wire sinks."""

    def test_default_sink_is_disabled(self):
        wire = WireLogger()

        assert not wire.enabled
        assert list(wire.tap([b"a", b"b"])) == [b"a", b"b"]

    def test_output_and_input_lines(self):
        sink = Mock()
        wire = WireLogger(sink)

        wire.output(b"PUT /b/k\nbody")
        wire.input("HTTP 200")

        assert sink.debug.call_args_list[0].args == ("%s %s", OUTBOUND, "PUT /b/k")
        assert sink.debug.call_args_list[1].args == ("%s %s", OUTBOUND, "body")
        assert sink.debug.call_args_list[2].args == ("%s %s", INBOUND, "HTTP 200")

    def test_tap_passes_chunks_through(self):
        sink = Mock()
        wire = WireLogger(sink)

        assert b"".join(wire.tap(iter([b"<a>", b"</a>"]))) == b"<a></a>"
        assert sink.debug.call_count == 2

    def test_explicitly_disabled(self):
        sink = Mock()

        WireLogger(sink, enabled=False).output("x")

        sink.debug.assert_not_called()

    def test_failure_reported_once_then_disabled(self, caplog):
        sink = Mock()
        sink.debug.side_effect = OSError("disk full")
        wire = WireLogger(sink)

        with caplog.at_level(logging.WARNING, logger="cloudwire.wire"):
            wire.output("a")
            wire.output("b")

        assert not wire.enabled
        assert sink.debug.call_count == 1
        assert [r.message for r in caplog.records] == ["Wire logging disabled after failure: disk full"]

    def test_signature_wire(self):
        sink = Mock()

        SignatureWire(sink).string_to_sign("GET\n\n\n\n/")

        assert sink.debug.call_args_list[0].args == ("%s %s", OUTBOUND, "GET")
        assert sink.debug.call_count == 5
