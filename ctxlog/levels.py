"""
ctxlog Severity Levels

Ordered severity model shared by the facade and the logging engine.
The most severe level has the lowest value, so ``level <= threshold``
decides whether a record is emitted.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Dict

from ctxlog.exceptions import InvalidLevelError

TRACE = 5
PANIC = 60

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PANIC, "PANIC")


class Level(IntEnum):
    """Logger severity levels, most severe first."""
    PANIC = 0    # Logs, then raises PanicError
    FATAL = 1    # Logs, then exits the process
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    @property
    def stdlib_level(self) -> int:
        """Get the equivalent ``logging`` numeric level."""
        return _STDLIB_LEVELS[self]

    @classmethod
    def from_backend(cls, name: str) -> "Level":
        """
        Strict parser used by the engine.

        Unlike ``to_log_level`` this refuses names it does not know.
        """
        if isinstance(name, str):
            level = _BACKEND_NAMES.get(name.lower())
            if level is not None:
                return level
        raise InvalidLevelError(name)


_NAMES: Dict[Level, str] = {
    Level.PANIC: "panic",
    Level.FATAL: "fatal",
    Level.ERROR: "error",
    Level.WARN: "warn",
    Level.INFO: "info",
    Level.DEBUG: "debug",
    Level.TRACE: "trace",
}

_LEVELS: Dict[str, Level] = {name: level for level, name in _NAMES.items()}

_BACKEND_NAMES: Dict[str, Level] = {**_LEVELS, "warning": Level.WARN}

_STDLIB_LEVELS: Dict[Level, int] = {
    Level.PANIC: PANIC,
    Level.FATAL: logging.CRITICAL,
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
    Level.TRACE: TRACE,
}


def parse_level(level: Any) -> str:
    """Convert a Level to its lowercase name, defaulting to ``"info"``."""
    try:
        return _NAMES.get(Level(level), "info")
    except (ValueError, TypeError):
        return "info"


def to_log_level(name: Any) -> Level:
    """Convert a level name to a Level, case-insensitively. Unknown names give INFO."""
    if not isinstance(name, str):
        return Level.INFO
    return _LEVELS.get(name.lower(), Level.INFO)


def from_stdlib_level(levelno: int) -> Level:
    """Map a ``logging`` level number onto the nearest Level not more severe."""
    for level in sorted(_STDLIB_LEVELS, key=lambda lvl: -_STDLIB_LEVELS[lvl]):
        if levelno >= _STDLIB_LEVELS[level]:
            return level
    return Level.TRACE
