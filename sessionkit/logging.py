"""structlog setup for apps that do not configure logging themselves."""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from sessionkit.config import get_settings


def configure_logging(level: Optional[str] = None, *, json: bool = True) -> None:
    """
    Render sessionkit events (and the host app's) as JSON lines, or console text with json=False.

    level defaults to LOG_LEVEL from settings.
    """
    level = level or get_settings().log_level
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO),
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
