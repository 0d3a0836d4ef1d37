"""
ctxlog Exceptions
"""

from __future__ import annotations

from typing import Any, Optional


class CtxlogError(Exception):
    """Base class for ctxlog errors."""


class InvalidLevelError(CtxlogError, ValueError):
    """Raised when the logging engine does not recognise a level name."""

    def __init__(self, level: Any):
        self.level = level
        super().__init__(f"not a valid log level: {level!r}")


class PanicError(CtxlogError):
    """
    Raised by ``Logger.panic`` once the record has been written.

    Carries the rendered message and the entry that produced it.
    """

    def __init__(self, message: str, entry: Optional[Any] = None):
        self.message = message
        self.entry = entry
        super().__init__(message)
