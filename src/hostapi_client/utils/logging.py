"""
Structured logging configuration for the hosting API client.

This module configures structured JSON logging and provides a logger that
accepts structured keyword fields alongside the message.
"""

import json
import logging
import sys
import time
from datetime import datetime

# Keyword arguments understood by logging.Logger itself
_LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")


class JsonFormatter(logging.Filter):
    """Rewrite every record's message as a single JSON document."""

    def filter(self, record):
        # Extract standard attributes
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }

        # Add any extra attributes passed via the extra parameter
        for key, value in getattr(record, "extras", {}).items():
            log_data[key] = value

        # Add exception info if present
        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        # Replace the message with the JSON string
        record.msg = json.dumps(log_data, default=str)
        record.args = ()

        return True


def configure_logging(level="INFO"):
    """Configure structured JSON logging on the root logger.

    Calling this more than once does not stack formatters.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(message)s",  # JSON is produced by the filter
    )

    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(f, JsonFormatter) for f in root.filters):
        root.addFilter(JsonFormatter())

    return root


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that turns keyword arguments into structured fields.

    ``logger.info("Requesting token", cache_key=key)`` attaches ``cache_key``
    to the record's ``extras`` mapping.
    """

    def __init__(self, logger):
        super().__init__(logger, {})

    def process(self, msg, kwargs):
        passthrough = {k: kwargs.pop(k) for k in _LOGGING_KWARGS if k in kwargs}
        extra = dict(passthrough.pop("extra", None) or {})
        extras = dict(extra.get("extras", {}))
        extras.update(kwargs)
        extra["extras"] = extras
        passthrough["extra"] = extra
        return msg, passthrough


def get_logger(name):
    """Get a structured logger with the specified name."""
    return StructuredLogger(logging.getLogger(name))


def log_with_context(logger, level, message, **context):
    """Log with additional context as structured fields."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if isinstance(logger, logging.LoggerAdapter):
        logger = logger.logger
    logger.log(level, message, extra={"extras": context})


class LogMetrics:
    """Context manager for logging the duration of a code block."""

    def __init__(self, logger, operation_name):
        self.logger = logger
        self.operation_name = operation_name
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time

        if exc_type is None:
            log_with_context(
                self.logger, "INFO", f"Completed {self.operation_name}",
                duration_seconds=duration,
            )
        else:
            log_with_context(
                self.logger, "ERROR", f"Failed {self.operation_name}: {exc_val}",
                duration_seconds=duration, error=str(exc_val),
            )
        return False
