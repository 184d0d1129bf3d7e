"""Tests for root logging setup and the component-tagged logger."""

import logging
import logging.handlers

import pytest

from sample_overlay.core import logging_config
from sample_overlay.core.logging_config import coerce_level, configure_logging
from sample_overlay.core.logging_utils import (
    StructuredLogger,
    ensure_structured_logger,
    get_module_logger,
)


@pytest.fixture
def clean_root(monkeypatch):
    """Snapshot the root logger so configure_logging cannot leak between tests."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    monkeypatch.setattr(logging_config, "_configured", False)
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)


class TestCoerceLevel:
    def test_names_case_insensitive(self):
        assert coerce_level("debug") == logging.DEBUG
        assert coerce_level(" Warning ") == logging.WARNING

    def test_int_passthrough(self):
        assert coerce_level(logging.ERROR) == logging.ERROR

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="chatty"):
            coerce_level("chatty")


class TestConfigureLogging:
    def test_console_handler_installed(self, clean_root):
        configure_logging("debug", force=True)

        assert clean_root.level == logging.DEBUG
        assert len(clean_root.handlers) == 1
        assert isinstance(clean_root.handlers[0], logging.StreamHandler)
        assert logging.getLogger("PIL").level == logging.WARNING

    def test_rotating_file_handler(self, clean_root, tmp_path):
        log_file = tmp_path / "logs" / "overlay.log"
        configure_logging("info", force=True, console=False, log_file=log_file)

        logging.getLogger("sample_overlay.test").info("written to file")
        for handler in clean_root.handlers:
            handler.flush()

        assert isinstance(clean_root.handlers[0], logging.handlers.RotatingFileHandler)
        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_no_outputs_falls_back_to_null_handler(self, clean_root):
        configure_logging("info", force=True, console=False)
        assert isinstance(clean_root.handlers[0], logging.NullHandler)

    def test_second_call_only_changes_level(self, clean_root):
        configure_logging("info", force=True)
        handlers = list(clean_root.handlers)

        configure_logging("error")
        assert clean_root.handlers == handlers
        assert clean_root.level == logging.ERROR


class TestStructuredLogger:
    def test_component_prefix(self, caplog):
        log = get_module_logger("overlay.cursor")
        with caplog.at_level(logging.INFO, logger="sample_overlay"):
            log.info("moved to %d", 3)

        assert log.name == "sample_overlay.overlay.cursor"
        assert caplog.records[-1].getMessage() == "[cursor] moved to 3"

    def test_prefix_not_doubled(self, caplog):
        log = get_module_logger("sources")
        with caplog.at_level(logging.INFO, logger="sample_overlay"):
            log.info("[sources] opened")
        assert caplog.records[-1].getMessage() == "[sources] opened"

    def test_namespace_not_repeated(self):
        assert get_module_logger("sample_overlay.app").name == "sample_overlay.app"
        assert get_module_logger().component == "Overlay"

    def test_exception_records_traceback(self, caplog):
        log = get_module_logger("events")
        with caplog.at_level(logging.ERROR, logger="sample_overlay"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                log.exception("listener failed")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None

    def test_get_child_extends_component(self):
        child = get_module_logger("overlay").getChild("loop")
        assert child.component == "overlay.loop"
        assert child.name == "sample_overlay.overlay.loop"

    def test_ensure_structured_logger(self):
        plain = logging.getLogger("custom.widget")
        wrapped = ensure_structured_logger(plain)
        assert isinstance(wrapped, StructuredLogger)
        assert wrapped.logger is plain
        assert wrapped.component == "widget"

        assert ensure_structured_logger(wrapped) is wrapped
        assert ensure_structured_logger(None, fallback_name="ui").name == "sample_overlay.ui"
