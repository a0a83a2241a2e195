"""Tests for compviz.core.diagnostics and compviz.core.logging."""

import io
import logging

import pytest

from compviz.core.diagnostics import Diagnostic, DiagnosticCode, Diagnostics
from compviz.core.logging import (
    BufferedHandler,
    configure_logging,
    get_logger,
    is_configured,
    reset_logging,
)
from compviz.data.dataset import CompositionDataset


@pytest.fixture
def buffered():
    handler = BufferedHandler()
    root = logging.getLogger("compviz")
    root.addHandler(handler)
    previous = root.level
    root.setLevel(logging.DEBUG)
    yield handler
    root.removeHandler(handler)
    root.setLevel(previous)


class TestDiagnostics:
    """Tests for the Diagnostics collector."""

    def test_add_and_query(self):
        diagnostics = Diagnostics()
        record = diagnostics.add(DiagnosticCode.UNKNOWN_SCALAR, "no such scalar", scalar="Q")

        assert isinstance(record, Diagnostic)
        assert len(diagnostics) == 1
        assert diagnostics.codes() == {DiagnosticCode.UNKNOWN_SCALAR}
        assert diagnostics.by_code(DiagnosticCode.UNKNOWN_SCALAR)[0].context == {"scalar": "Q"}
        assert diagnostics.by_code(DiagnosticCode.EMPTY_INPUT) == []
        assert str(record) == "[unknown_scalar] no such scalar"

    def test_empty_collector_is_falsy(self):
        diagnostics = Diagnostics()
        assert not diagnostics
        diagnostics.add(DiagnosticCode.EMPTY_INPUT, "empty")
        assert diagnostics
        diagnostics.clear()
        assert not diagnostics

    def test_extend(self):
        first, second = Diagnostics(), Diagnostics()
        second.add(DiagnosticCode.UNKNOWN_AXIS, "a")
        first.extend(second)
        assert [d.message for d in first] == ["a"]

    def test_records_are_logged(self, buffered):
        Diagnostics().add(DiagnosticCode.UNKNOWN_AXIS, "axis zn unknown")
        records = buffered.get_records()
        assert records[-1].levelno == logging.WARNING
        assert records[-1].getMessage() == "axis zn unknown"

    def test_injected_collector_is_used(self):
        """An empty collector passed in is the one receiving records."""
        diagnostics = Diagnostics()
        dataset = CompositionDataset(3, diagnostics=diagnostics)
        dataset.set_active_scalar("T")
        assert dataset.diagnostics is diagnostics
        assert len(diagnostics) == 1


class TestLogging:
    """Tests for logger configuration."""

    def teardown_method(self):
        reset_logging()

    def test_get_logger_namespaced(self):
        assert get_logger("compviz.data").name == "compviz.data"
        assert get_logger("plugin").name == "compviz.plugin"

    def test_configure_and_reset(self):
        stream = io.StringIO()
        configure_logging(verbose=1, stream=stream)
        assert is_configured()
        get_logger("compviz.test").info("hello")
        assert "hello" in stream.getvalue()

        reset_logging()
        assert not is_configured()

    def test_verbose_levels(self):
        assert configure_logging(verbose=0).level == logging.WARNING
        assert configure_logging(verbose=2).level == logging.DEBUG

    def test_reconfigure_replaces_handler(self):
        root = configure_logging(verbose=1, stream=io.StringIO())
        count = len(root.handlers)
        configure_logging(verbose=1, stream=io.StringIO())
        assert len(root.handlers) == count


class TestBufferedHandler:
    """Tests for BufferedHandler."""

    def test_max_size(self):
        handler = BufferedHandler(max_size=2)
        logger = logging.getLogger("compviz.buffer_test")
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            for i in range(3):
                logger.info(f"message {i}")
        finally:
            logger.removeHandler(handler)
        assert handler.get_messages() == ["message 0", "message 1"]

    def test_flush_to(self):
        source, target = BufferedHandler(), BufferedHandler()
        source.emit(logging.LogRecord("compviz", logging.INFO, __file__, 1, "x", None, None))
        source.flush_to(target)
        assert source.get_records() == []
        assert target.get_messages() == ["x"]
