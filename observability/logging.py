"""Logging setup for the DTree connector.

The genealogists log their climbing traces at DEBUG with a ``DESCENDANTS:``
prefix and their orphans at a configurable level. The formatters here
lift that prefix into a ``trace`` field, so that JSON logs can be
filtered on it without parsing messages.
"""

from __future__ import annotations
import logging
import sys
import json
import time
import functools
from typing import Any, Dict, Optional, Tuple
from datetime import datetime, timezone
from pathlib import Path

SERVICE_NAME = "dtree-connector"

# Message prefixes used by the genealogy and cache modules
TRACE_PREFIXES = ("DESCENDANTS", "CACHE")

# Attributes every LogRecord has; anything else was passed as extra
_STANDARD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def split_trace(message: str) -> Tuple[Optional[str], str]:
    """Split a ``DESCENDANTS: ...`` style message into its prefix and text."""
    prefix, sep, rest = message.partition(": ")
    if sep and prefix in TRACE_PREFIXES:
        return prefix, rest
    return None, message


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        trace, message = split_trace(record.getMessage())
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "service": self.service_name,
            "thread": record.threadName,
        }
        if trace:
            entry["trace"] = trace

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Extra fields, such as the duration from log_performance
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRIBUTES:
                entry[key] = value

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Single-line console format, colored by level."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        line = f"{timestamp} | {record.levelname:8} | {record.name} | {record.getMessage()}"

        if self.use_colors and record.levelname in self.COLORS:
            line = f"{self.COLORS[record.levelname]}{line}{self.RESET}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: str = "INFO",
    service_name: str = SERVICE_NAME,
    log_file: Optional[str] = None,
    use_json: bool = False,
    use_colors: bool = True
) -> None:
    """Install the connector's handlers on the root logger.

    Console output goes to stderr, so that script output on stdout stays
    parseable. A log file, if given, always gets JSON.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Service name recorded in JSON logs
        log_file: Optional file path for JSON file logging
        use_json: Whether the console gets JSON instead of text
        use_colors: Whether text console output is colored
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(JSONFormatter(service_name) if use_json else ColoredFormatter(use_colors))
    root_logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JSONFormatter(service_name))
        root_logger.addHandler(file_handler)

    # SQL echo is controlled by DatabaseConfig.echo_sql
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def setup_logging_from_config(config, log_file: Optional[str] = None) -> None:
    """Configure logging from the ``logging`` section of a ConnectorConfig."""
    setup_logging(
        level=config.get_log_level(),
        log_file=log_file,
        use_json=config.get_log_format() == "json",
        use_colors=sys.stderr.isatty()
    )


def log_performance(logger_name: Optional[str] = None, threshold_ms: float = 1000.0):
    """Decorator that warns about calls slower than the threshold.

    Failures are logged with their duration and re-raised.
    """
    def decorator(func):
        logger = logging.getLogger(logger_name or func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Function failed: {func.__name__}",
                    extra={
                        "function": func.__name__,
                        "duration_ms": (time.perf_counter() - start_time) * 1000,
                        "error_type": type(e).__name__
                    }
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            if duration_ms > threshold_ms:
                logger.warning(
                    f"Slow function execution: {func.__name__}",
                    extra={
                        "function": func.__name__,
                        "duration_ms": duration_ms,
                        "threshold_ms": threshold_ms
                    }
                )
            return result

        return wrapper
    return decorator
