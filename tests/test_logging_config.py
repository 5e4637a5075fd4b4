"""Tests for the structured logging module."""

import json
import logging

import pytest

from faker_mcp.config import AppConfig, LoggingConfig
from faker_mcp.exceptions import ConfigurationError
from faker_mcp.logging_config import (
    LogMetrics,
    StructuredFormatter,
    StructuredLogger,
    get_logger,
    log_error_with_context,
    setup_logging,
)


def make_record(message="Session initialized: abc", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("faker_mcp.router", level, __file__, 10, message, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON and text output."""

    def test_json_output(self):
        formatter = StructuredFormatter(json_format=True)

        data = json.loads(formatter.format(make_record(session_id="abc")))

        assert data["level"] == "INFO"
        assert data["logger"] == "faker_mcp.router"
        assert data["message"] == "Session initialized: abc"
        assert data["extra"] == {"session_id": "abc"}
        assert data["timestamp"].endswith("+00:00")

    def test_text_output(self):
        formatter = StructuredFormatter()

        line = formatter.format(make_record(session_id="abc"))

        assert "[INFO    ] faker_mcp.router: Session initialized: abc" in line
        assert line.endswith("| session_id=abc")

    def test_extra_fields_can_be_disabled(self):
        formatter = StructuredFormatter(json_format=True, include_extra=False)

        data = json.loads(formatter.format(make_record(session_id="abc")))

        assert "extra" not in data

    def test_non_serializable_extra_is_stringified(self):
        formatter = StructuredFormatter(json_format=True)

        data = json.loads(formatter.format(make_record(transport=object())))

        assert data["extra"]["transport"].startswith("<object object")

    def test_exception_info(self):
        try:
            raise RuntimeError("close failed")
        except RuntimeError as e:
            record = make_record("Error closing session", logging.ERROR, (type(e), e, e.__traceback__))

        data = json.loads(StructuredFormatter(json_format=True).format(record))

        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "close failed"
        assert "Traceback" in data["exception"]["traceback"]


class TestStructuredLogger:
    """Test metrics kept by StructuredLogger."""

    def test_levels_are_counted(self):
        logger = StructuredLogger("test.metrics")

        logger.debug("d")
        logger.info("i")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        logger.critical("c")

        assert logger.metrics.log_counts == {"DEBUG": 1, "INFO": 2, "WARNING": 1, "ERROR": 1, "CRITICAL": 1}

    def test_summary(self):
        metrics = LogMetrics()
        metrics.increment_log_count("INFO")
        metrics.increment_log_count("ERROR")
        metrics.increment_log_count("NOT_A_LEVEL")

        summary = metrics.get_summary()

        assert summary["total_logs"] == 2
        assert summary["error_rate"] == 0.5

    def test_empty_summary(self):
        assert LogMetrics().get_summary()["error_rate"] == 0

    def test_get_logger(self):
        logger = get_logger("faker_mcp.test")

        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "faker_mcp.test"

    def test_messages_reach_underlying_logger(self, caplog):
        logger = get_logger("faker_mcp.test")

        with caplog.at_level(logging.INFO, logger="faker_mcp.test"):
            logger.info("Session closed: %s", "abc")

        assert "Session closed: abc" in caplog.text


class TestSetupLogging:
    """Test root logger configuration."""

    def test_console_handler(self, restore_root_logger):
        setup_logging(AppConfig(logging=LoggingConfig(level="WARNING", json_format=True)))

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.handlers[0].formatter.json_format is True
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "server.log"

        setup_logging(AppConfig(logging=LoggingConfig(file_path=str(log_file))))
        logging.getLogger("faker_mcp.test").info("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert len(restore_root_logger.handlers) == 2
        content = log_file.read_text()
        assert "Logging configured successfully" in content
        assert "written to file" in content

    def test_unwritable_file(self, restore_root_logger, tmp_path):
        config = AppConfig(logging=LoggingConfig(file_path=str(tmp_path / "missing" / "server.log")))

        with pytest.raises(ConfigurationError) as exc_info:
            setup_logging(config)

        assert exc_info.value.details["config"]["file_path"].endswith("server.log")


class TestLogErrorWithContext:
    """Test error logging with context."""

    def test_context_and_traceback(self, caplog):
        logger = logging.getLogger("faker_mcp.test")
        error = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="faker_mcp.test"):
            log_error_with_context(logger, "Error handling MCP request", error, method="POST")

        record = caplog.records[-1]
        assert record.getMessage() == "Error handling MCP request"
        assert record.error_context == {"method": "POST"}
        assert record.exc_info[1] is error

    def test_without_exception(self, caplog):
        logger = get_logger("faker_mcp.test")

        with caplog.at_level(logging.ERROR, logger="faker_mcp.test"):
            log_error_with_context(logger, "Something failed", session_id="abc")

        record = caplog.records[-1]
        assert record.exc_info is None
        assert record.error_context == {"session_id": "abc"}
        assert logger.metrics.log_counts["ERROR"] == 1
