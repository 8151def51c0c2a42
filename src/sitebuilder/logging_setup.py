"""Logging configuration for the site builder.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers onto the ``sitebuilder`` package logger.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .settings import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | None = None, *, log_path: Path | None = None) -> None:
    """Attach a rotating file handler and a stderr handler to the package logger.

    Safe to call more than once; handlers are only installed the first time.

    Args:
        level: Log level name. Defaults to ``settings.log_level``.
        log_path: Log file location. Defaults to ``settings.log_path``.
    """
    global _configured

    root = logging.getLogger("sitebuilder")
    root.setLevel((level or settings.log_level).upper())
    if _configured:
        return

    formatter = logging.Formatter(_LOG_FORMAT)

    path = log_path or settings.log_path
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        path,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.WARNING)
    root.addHandler(stream_handler)

    _configured = True
