"""Structured Logging Framework for the Faker MCP Server.

This module configures logging for the Faker MCP server application. It
supports human-readable and JSON output, optional file rotation, and
structured ``extra`` fields attached to log records.

Classes
-------
StructuredFormatter
    Formatter emitting text or JSON lines with extra fields
LogMetrics
    Per-level message counters
StructuredLogger
    Thin wrapper around ``logging.Logger`` that keeps metrics

Functions
---------
setup_logging
    Configure the logging system from application configuration
get_logger
    Get a logger instance with structured logging capabilities
log_error_with_context
    Log an error with context information

Examples
--------
    >>> from faker_mcp.logging_config import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Session initialized", extra={"session_id": "abc123"})

See Also
--------
faker_mcp.config : Configuration management
"""

import json
import logging
import logging.handlers
import sys
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Union

from .config import get_config
from .exceptions import ConfigurationError

_RESERVED_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "message",
        "asctime",
        "color_message",
    }
)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured log output.

    Attributes
    ----------
    json_format : bool
        Whether to output in JSON format
    include_extra : bool
        Whether to include extra fields in the output
    """

    def __init__(self, json_format: bool = False, include_extra: bool = True):
        super().__init__()
        self.json_format = json_format
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record.

        Parameters
        ----------
        record : logging.LogRecord
            The log record to format

        Returns
        -------
        str
            Formatted log message
        """
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            extra_fields = {}
            for key, value in record.__dict__.items():
                if key in _RESERVED_RECORD_ATTRS:
                    continue
                try:
                    # Keep only JSON serializable values as-is
                    json.dumps(value)
                    extra_fields[key] = value
                except (TypeError, ValueError):
                    extra_fields[key] = str(value)

            if extra_fields:
                log_data["extra"] = extra_fields

        if self.json_format:
            return json.dumps(log_data, ensure_ascii=False)

        base_msg = f"{log_data['timestamp']} [{log_data['level']:8}] {log_data['logger']}: {log_data['message']}"

        if "extra" in log_data and log_data["extra"]:
            extra_str = " | ".join(f"{k}={v}" for k, v in log_data["extra"].items())
            base_msg += f" | {extra_str}"

        if "exception" in log_data:
            base_msg += f"\n{log_data['exception']['traceback']}"

        return base_msg


class LogMetrics:
    """Per-level message counters for a logger."""

    def __init__(self):
        self.log_counts = {"DEBUG": 0, "INFO": 0, "WARNING": 0, "ERROR": 0, "CRITICAL": 0}

    def increment_log_count(self, level: str):
        if level in self.log_counts:
            self.log_counts[level] += 1

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of collected counts.

        Returns
        -------
        Dict[str, Any]
            Totals per level and the share of ERROR/CRITICAL messages
        """
        total_logs = sum(self.log_counts.values())
        error_rate = (self.log_counts["ERROR"] + self.log_counts["CRITICAL"]) / max(total_logs, 1)
        return {"total_logs": total_logs, "log_counts": dict(self.log_counts), "error_rate": error_rate}


class StructuredLogger:
    """Wrapper around the Python logging module that keeps metrics.

    Attributes
    ----------
    logger : logging.Logger
        The underlying Python logger
    metrics : LogMetrics
        Metrics collector instance
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.metrics = LogMetrics()

    def _log_with_metrics(self, level: str, message: str, *args, **kwargs):
        self.metrics.increment_log_count(level)
        log_method = getattr(self.logger, level.lower())
        log_method(message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        """Log a debug message."""
        self._log_with_metrics("DEBUG", message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        """Log an info message."""
        self._log_with_metrics("INFO", message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        """Log a warning message."""
        self._log_with_metrics("WARNING", message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        """Log an error message."""
        self._log_with_metrics("ERROR", message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        """Log a critical message."""
        self._log_with_metrics("CRITICAL", message, *args, **kwargs)


def setup_logging(config=None) -> None:
    """Configure logging system with settings from configuration.

    Parameters
    ----------
    config : AppConfig, optional
        Application configuration (default: loads from environment)

    Raises
    ------
    ConfigurationError
        If logging configuration is invalid
    """
    if config is None:
        config = get_config()

    try:
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.logging.level))

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        formatter = StructuredFormatter(json_format=config.logging.json_format)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if config.logging.file_path:
            file_handler = logging.handlers.RotatingFileHandler(
                config.logging.file_path,
                maxBytes=config.logging.max_file_size_mb * 1024 * 1024,
                backupCount=config.logging.backup_count,
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Library loggers
        logging.getLogger("uvicorn").setLevel(logging.INFO)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("fastmcp").setLevel(logging.INFO)
        logging.getLogger("mcp").setLevel(logging.WARNING)
        logging.getLogger("faker").setLevel(logging.WARNING)

        logging.getLogger(__name__).info(
            "Logging configured successfully",
            extra={
                "level": config.logging.level,
                "json_format": config.logging.json_format,
                "file_path": config.logging.file_path,
            },
        )

    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to configure logging: {str(e)}", details={"config": config.logging.model_dump()}, cause=e
        ) from e


def get_logger(name: str) -> StructuredLogger:
    """Get a logger instance with structured logging capabilities.

    Parameters
    ----------
    name : str
        Name of the logger (usually __name__)

    Returns
    -------
    StructuredLogger
        Logger instance with structured logging features
    """
    return StructuredLogger(name)


def log_error_with_context(
    logger: Union[StructuredLogger, logging.Logger],
    message: str,
    exception: Optional[BaseException] = None,
    **context,
):
    """Log an error with context information.

    Parameters
    ----------
    logger : Union[StructuredLogger, logging.Logger]
        Logger instance to use
    message : str
        Error message
    exception : BaseException, optional
        Exception that caused the error; its traceback is attached
    **context
        Additional context information
    """
    exc_info = (type(exception), exception, exception.__traceback__) if exception is not None else None
    logger.error(message, exc_info=exc_info, extra={"error_context": context})
