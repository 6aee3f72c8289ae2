"""Structured logging for the authorization engine.

Events are emitted through structlog on top of stdlib logging. Request
attribute values may carry personal data, so any event field named in
``REDACTED_FIELDS`` is masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED_FIELDS = frozenset({"attributes"})
REDACTED = "[redacted]"


def redact_attributes(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask request attribute values in an event."""
    for key in REDACTED_FIELDS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def setup_logging(level: str = "INFO", log_format: str = "json", service: str = "authz_engine") -> None:
    """Set up structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format ('json' or 'console')
        service: Value of the ``service`` field bound to every event
    """
    numeric_level = getattr(logging, level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_attributes,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service)


def get_logger(name: str | None = None, **context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally bound to extra context (e.g. ``principal=...``)."""
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger
