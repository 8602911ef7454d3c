"""
Logging setup for the CLI and for embedding the game core.

APP_ENV=production emits one JSON object per record on stdout for log
collectors; anything else gets a readable line on stderr so it does not
interleave with the interactive prompt on stdout.
"""

from __future__ import annotations

import logging
import sys

import json_log_formatter

from geoguess.config import get_settings


def setup_logging() -> None:
    """Configure logging based on environment."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.env == "production":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(json_log_formatter.JSONFormatter())

        root = logging.getLogger()
        root.setLevel(level)
        root.handlers = [handler]
    else:
        _setup_basic_logging(level)


def _setup_basic_logging(level: int) -> None:
    """Human-readable logging for development."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Dataset downloads and round timers log every request / job at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
