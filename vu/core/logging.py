"""Process-wide logging setup.

vu logs through loguru. The CLI calls ``init_logging`` once; library modules
just ``from loguru import logger``.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO

from loguru import logger

__all__ = ["init_logging", "LOG_FORMAT", "LOG_LEVEL_ENV", "DEFAULT_LEVEL"]

LOG_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}][{level}] {message}"
LOG_LEVEL_ENV = "VU_LOG"
DEFAULT_LEVEL = "INFO"

_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: str | None) -> str:
    """Pick the log level: explicit value, then $VU_LOG, then INFO.

    Unknown names fall back to the default instead of failing the run.
    """
    candidate = level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LEVEL
    candidate = candidate.strip().upper()
    if candidate == "WARN":
        candidate = "WARNING"
    return candidate if candidate in _LEVELS else DEFAULT_LEVEL


def init_logging(level: str | None = None, sink: TextIO | None = None) -> int:
    """Replace loguru's default handler with vu's stderr format.

    Returns the handler id so callers (tests) can remove it again.
    """
    logger.remove()
    return logger.add(
        sink or sys.stderr,
        level=resolve_level(level),
        format=LOG_FORMAT,
        colorize=False,
    )
