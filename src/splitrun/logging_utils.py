"""Structured logging setup for splitrun.

Logs go to stderr so stdout carries only the failure report (or JSON).
"""

from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog

LogFormat = Literal["console", "plain", "json"]


def configure_logging(log_level: str = "warning", log_format: LogFormat = "console") -> None:
    """Configure structlog processors and the stdlib handler it writes through.

    Args:
        log_level: Level name (debug, info, warning, error).
        log_format: 'console' (colored), 'plain' (no colors), or 'json'.
    """
    normalized_level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=normalized_level,
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_format == "console"))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(normalized_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
