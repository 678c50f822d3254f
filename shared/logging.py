"""
Centralized structured logging for the service.

Provides:
- setup_logging(): configure stdlib logging + structlog once at startup
- get_logger(): get a configured logger instance
- log_with_context(): bind common context (user_id, otp_id) to a logger

Production renders JSON; development renders a coloured console format.
Sensitive keys are redacted before rendering so OTP codes and secrets never
reach durable logs.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

from config import LoggingSettings

# Keys redacted when they match exactly
REDACTED_FIELDS = {
    "otp",
    "otp_code",
    "code",
    "password",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "secret",
    "key",
}

# Keys redacted when they contain one of these fragments
_REDACTED_FRAGMENTS = ("password", "token", "secret", "auth_key")

_PRESERVED_KEYS = {"level", "event", "timestamp", "logger"}


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return lowered in REDACTED_FIELDS or any(
        fragment in lowered for fragment in _REDACTED_FRAGMENTS
    )


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: "***REDACTED***" if isinstance(k, str) and _is_sensitive(k) else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(v) for v in value)
    return value


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs, including inside nested dicts and lists."""
    for key in list(event_dict.keys()):
        if key in _PRESERVED_KEYS:
            continue
        if _is_sensitive(key):
            event_dict[key] = "***REDACTED***"
        else:
            event_dict[key] = _redact(event_dict[key])
    return event_dict


def configure_structlog(log_format: str) -> None:
    """
    Configure structlog with processors for the chosen output format.

    json:    machine-parseable output for production
    console: pretty, coloured output for development
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str) -> None:
    """Route stdlib logging to stdout and quiet noisy third-party loggers."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("pymongo.connection").setLevel(logging.WARNING)
    logging.getLogger("pymongo.serverSelection").setLevel(logging.WARNING)
    logging.getLogger("pymongo.command").setLevel(logging.WARNING)
    logging.getLogger("pymongo.topology").setLevel(logging.WARNING)


def setup_logging(
    settings: Optional[LoggingSettings] = None, env: str = "development"
) -> None:
    """
    Initialize the logging system.

    Called once from create_app() before anything else logs.
    """
    if settings is None:
        settings = LoggingSettings()

    configure_stdlib_logging(settings.log_level)
    configure_structlog(settings.log_format)

    get_logger(__name__).info(
        "logging_initialized",
        env=env,
        log_level=settings.log_level,
        log_format=settings.log_format,
    )


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("user_created", user_id="123", auth_provider="mobile")
    """
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """Bind context to a logger for all subsequent log calls."""
    return logger.bind(**context)
