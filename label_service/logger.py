"""
Structured logging for the label service (structlog over stdlib logging).

Call sites pass context as ``extra={...}``; it is merged into the event so
fields like ``hu_number`` or ``size`` show up as top-level keys.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

from label_service.config import settings

SERVICE_NAME = "label-service"


def _merge_extra(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Lift the ``extra`` mapping into the event itself."""
    extra = event_dict.pop("extra", None)
    if extra:
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level name (defaults to settings.log_level)
        json_logs: Render JSON lines (defaults to on outside development)
    """
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = not settings.is_development

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level)
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        _merge_extra,
        _add_service,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("HU number regenerated", extra={"hu_number": hu})
    """
    return structlog.get_logger(name)


configure_logging()
