"""
ctxlog Standard Logging Bridge

Routes records from Python's ``logging`` module (third-party libraries,
legacy modules) into a ctxlog logger.

Usage:
    import logging
    handler = LoggerHandler(logger.set_area("stdlib"))
    logging.getLogger().addHandler(handler)
"""

from __future__ import annotations

import logging

from ctxlog.levels import Level, from_stdlib_level
from ctxlog.structured import (
    FILE_FIELD,
    FUNC_FIELD,
    LINE_FIELD,
    StructuredLogger,
)


class LoggerHandler(logging.Handler):
    """Python logging handler that forwards to a StructuredLogger."""

    def __init__(self, logger: StructuredLogger, level: int = logging.NOTSET):
        super().__init__(level)
        self._logger = logger

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record."""
        try:
            message = self.format(record)
            level = from_stdlib_level(record.levelno)

            fields = {"logger": record.name}
            # Caller metadata comes from the record, not from this frame.
            if level <= Level.ERROR:
                fields.update({
                    FILE_FIELD: record.pathname,
                    LINE_FIELD: record.lineno,
                    FUNC_FIELD: f"{record.module}.{record.funcName}",
                })
            logger = self._logger.with_fields(fields)
            if record.exc_info and record.exc_info[1]:
                logger = logger.with_error(record.exc_info[1])

            # Library records never terminate or unwind the process.
            logger.log(max(level, Level.ERROR), message)
        except Exception:
            self.handleError(record)
