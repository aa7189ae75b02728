"""
BlogChecker Logging Configuration
=================================

Console or JSON log output for the CLI and the request-triggered worker.

Every component logs through a ``ComponentLogger`` carrying its name and,
where known, the site and feed URLs it is working on. The JSON formatter
promotes those fields to top-level keys so log queries can filter on them.
"""

import logging
import sys
import json
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Tuple


# Context keys promoted to top-level fields in JSON output
CONTEXT_FIELDS = ("component", "site_url", "feed_url", "request_id")

_STANDARD_RECORD_FIELDS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_FIELDS
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, context fields first."""

    def format(self, record: logging.LogRecord) -> str:
        extras = _record_extras(record)

        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            if extras.get(key) is not None:
                log_data[key] = extras.pop(key)
            else:
                extras.pop(key, None)

        if extras:
            log_data["extra"] = extras
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line console output: ``HH:MM:SS LEVEL component message (key=value ...)``."""

    def format(self, record: logging.LogRecord) -> str:
        extras = _record_extras(record)
        component = extras.pop("component", record.name)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        line = f"{timestamp} {record.levelname:<7} {component}: {record.getMessage()}"
        details = " ".join(f"{k}={v}" for k, v in extras.items() if v is not None)
        if details:
            line += f" ({details})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ComponentLogger(logging.LoggerAdapter):
    """Logger adapter that attaches component context to every record.

    Context passed at the call site through ``extra`` takes precedence over
    the adapter's own.
    """

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "ComponentLogger":
        """Return a logger with additional context; ``None`` values are ignored."""
        extra = dict(self.extra)
        extra.update({k: v for k, v in context.items() if v is not None})
        return ComponentLogger(self.logger, extra)


def get_logger_for_component(
    component_name: str,
    site_url: Optional[str] = None,
    feed_url: Optional[str] = None,
) -> ComponentLogger:
    """Get a logger with component-specific context.

    Args:
        component_name: Name of the component (e.g., 'http', 'pipeline')
        site_url: Site URL being processed (optional)
        feed_url: Feed URL being processed (optional)

    Returns:
        ComponentLogger under the ``blogchecker`` logger tree
    """
    logger = ComponentLogger(
        logging.getLogger(f"blogchecker.{component_name}"), {"component": component_name}
    )
    return logger.bind(site_url=site_url, feed_url=feed_url)


def configure_application_logging(
    log_level: str = "INFO",
    enable_console: bool = True,
    structured_logging: bool = False,
) -> logging.Logger:
    """Configure the ``blogchecker`` logger tree.

    Safe to call again on a warm worker: existing handlers are replaced.

    Args:
        log_level: Level name for the ``blogchecker`` logger
        enable_console: Write records to stdout
        structured_logging: JSON lines instead of the console format

    Returns:
        The configured root ``blogchecker`` logger
    """
    logger = logging.getLogger("blogchecker")
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers.clear()

    if enable_console:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter() if structured_logging else ConsoleFormatter())
        logger.addHandler(handler)
    else:
        logger.addHandler(logging.NullHandler())

    for noisy in ("urllib3", "requests", "feedparser", "botocore", "boto3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


class PerformanceLogger:
    """Times a pipeline stage and logs its outcome with ``duration_ms``."""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, **context: Any):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        self.logger.debug(f"Starting {self.operation}", extra=dict(self.context))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = round((time.perf_counter() - self._started) * 1000, 1)
        context = {**self.context, "duration_ms": self.duration_ms}

        if exc_type:
            context["error_type"] = exc_type.__name__
            self.logger.warning(f"{self.operation} failed after {self.duration_ms}ms", extra=context)
        else:
            self.logger.info(f"{self.operation} took {self.duration_ms}ms", extra=context)
