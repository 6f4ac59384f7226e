"""structlog setup for the stackscan CLI: events from ``stackscan.*`` loggers go to stderr."""

from __future__ import annotations

import logging
import logging.config
import os
import sys

import structlog

_LOG_FORMATS = ("console", "json")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    # No ANSI colors when stderr is piped into a file or CI log
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: str | None = None) -> None:
    """Route stackscan's structlog events through one stderr handler.

    The ``stackscan`` logger gets *level*, falling back to
    ``STACKSCAN_LOG_LEVEL`` (default INFO). ``STACKSCAN_LOG_FORMAT`` picks the
    renderer: ``console`` (default) or ``json``; unknown values mean console.
    Third-party loggers stay at WARNING.
    """
    log_level = (level or os.environ.get("STACKSCAN_LOG_LEVEL", "INFO")).upper()
    log_format = os.environ.get("STACKSCAN_LOG_FORMAT", "console").lower()
    if log_format not in _LOG_FORMATS:
        log_format = "console"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so `stackscan analyze --json` output stays parseable.
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": "WARNING",
            },
            "loggers": {
                "stackscan": {"level": log_level},
            },
        }
    )
