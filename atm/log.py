"""
Structured logging configuration using structlog.

Logs go to stderr so that command output on stdout stays clean.
"""

import logging
import sys

import structlog
from structlog.types import Processor


def setup_logging(verbose: bool = False) -> None:
    """
    Configure structured logging for the CLI.

    Usage:
        setup_logging(verbose=True)
        logger = get_logger(__name__)
        logger.info("snapshot_written", path="/var/lib/atm/state", topics=3)
    """
    level = logging.DEBUG if verbose else logging.WARNING

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger (defaults to the module name)."""
    return structlog.get_logger(name)
