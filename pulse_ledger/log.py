"""
structlog setup for the ledger engine.

Call configure_logging() once at application start-up. The engine never
configures logging itself.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from .config import LedgerSettings, load_settings


def configure_logging(settings: Optional[LedgerSettings] = None) -> None:
    settings = settings or load_settings()
    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    name = name or "pulse_ledger"
    # Lazy proxy: picks up whatever configuration is active at each call.
    return structlog.get_logger(name, logger_name=name)
