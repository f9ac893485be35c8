"""Logging setup for the CLI."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO

from .config import Config
from .storage import ensure_structure

LOG_FILENAME = "sciconnect.log"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _has_handler(logger: logging.Logger, kind: type, tag: str) -> bool:
    return any(
        isinstance(h, kind) and getattr(h, "sciconnect_tag", None) == tag
        for h in logger.handlers
    )


def setup_logging(
    config: Config,
    console: Optional[TextIO] = None,
) -> tuple[logging.Logger, str]:
    """Attach the rotating log file and a console echo to the package logger.

    The file gets everything at the configured level (DEBUG when
    ``debug_logging`` is on). The console only shows warnings and errors, so
    degraded calls and failed donations reach the user without the lifecycle
    chatter. Calling this again reuses the existing handlers.
    """
    paths = ensure_structure(config.base_dir, config.log_dir)
    log_path = os.path.join(paths["logs"], LOG_FILENAME)
    level = logging.DEBUG if config.debug_logging else logging.INFO

    logger = logging.getLogger("sciconnect")
    logger.setLevel(level)

    if not _has_handler(logger, RotatingFileHandler, "file"):
        handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler.sciconnect_tag = "file"
        logger.addHandler(handler)

    if not _has_handler(logger, logging.StreamHandler, "console"):
        stream_handler = logging.StreamHandler(console or sys.stderr)
        stream_handler.setLevel(logging.WARNING)
        stream_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        stream_handler.sciconnect_tag = "console"
        logger.addHandler(stream_handler)

    return logger, log_path
