"""Console logging setup for the micanalyzer command.

Library modules only create loggers; handlers are installed here, once, by
the program that runs the analyzer.
"""
from __future__ import annotations

import logging

_ROOT_NAME = "micanalyzer"
_FORMAT = "[%(levelname)s][%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the package logger (idempotent)."""
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    set_log_level(level)
    return root


def set_log_level(level: str) -> None:
    """Set package log level (DEBUG/INFO/WARNING/ERROR)."""
    level_name = (level or "INFO").upper()
    level_val = getattr(logging, level_name, logging.INFO)
    logging.getLogger(_ROOT_NAME).setLevel(level_val)


def get_log_level() -> str:
    """Return current package log level name."""
    return logging.getLevelName(logging.getLogger(_ROOT_NAME).level)
