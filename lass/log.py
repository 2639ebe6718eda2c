"""Structured logging for the Lass runtime.

Library modules log through :func:`get_logger`, which routes structlog events
into a stdlib logger of the same name, so nothing is emitted until the host
(or the ``lass`` CLI via :func:`configure_logging`) installs a handler.
"""
from __future__ import annotations

import logging
import sys

import structlog

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def get_logger(name: str):
    return structlog.wrap_logger(logging.getLogger(name))


def configure_logging(level: str = "WARNING", fmt: str = "console", stream=None) -> None:
    """Send Lass (and any other stdlib) log records to *stream* (stderr)."""

    default_level = _LEVEL_MAP.get(level.upper())
    if default_level is None:
        raise ValueError(f"Unknown log level: {level}")

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False, pad_event_to=0)
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(default_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)
    root_logger.addHandler(handler)


__all__ = ["configure_logging", "get_logger"]
