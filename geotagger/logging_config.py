"""
Logging setup for the CLI and the API.

Everything goes to stderr so that `geotagger tag` can print JSON on stdout.
In production each record is one JSON object per line; otherwise a plain
human-readable format is used.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from geotagger.config import get_settings

_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level_name: Optional[str] = None) -> None:
    """Configure the root logger. ``level_name`` overrides LOG_LEVEL."""
    settings = get_settings()
    level = getattr(logging, (level_name or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if settings.env == "production":
        try:
            import json_log_formatter

            handler.setFormatter(json_log_formatter.JSONFormatter())
        except ImportError:
            handler.setFormatter(_plain_formatter())
    else:
        handler.setFormatter(_plain_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _plain_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
