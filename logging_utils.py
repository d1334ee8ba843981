"""Shared logging configuration helpers."""

from __future__ import annotations

import logging
import sys
from typing import Iterable

import cv2

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS.keys())

# OpenCV logs through its own C++ logger; keep it one step quieter than ours
# so DNN backend chatter only shows up at debug level.
_OPENCV_LOG_LEVELS = {
    logging.DEBUG: "LOG_LEVEL_INFO",
    logging.INFO: "LOG_LEVEL_WARNING",
    logging.WARNING: "LOG_LEVEL_WARNING",
    logging.ERROR: "LOG_LEVEL_ERROR",
    logging.CRITICAL: "LOG_LEVEL_FATAL",
}


def add_logging_args(parser) -> None:
    """Add standard logging options to an argparse parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help="Set log verbosity (debug, info, warning, error, critical)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (use -vv for more detail)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Reduce log verbosity (use -qq for errors only)",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Resolve a numeric log level from explicit or modifier flags."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]

    offset = verbose - quiet
    if offset >= 1:
        return logging.DEBUG
    if offset == 0:
        return logging.INFO
    if offset == -1:
        return logging.WARNING
    return logging.ERROR


def configure_opencv_logging(level: int) -> None:
    """Set OpenCV's native log level to match a Python log level."""
    cv_logging = getattr(cv2.utils, "logging", None)
    if cv_logging is None:
        return
    name = _OPENCV_LOG_LEVELS.get(level, "LOG_LEVEL_WARNING")
    cv_logging.setLogLevel(getattr(cv_logging, name))


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging and OpenCV logging, and return the active level."""
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    configure_opencv_logging(level)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )
    return level
