"""
ctxlog - Contextual Structured Logging

A logging facade over structlog with:
- Ordered severity levels with string conversion
- Immutable, derivable loggers carrying correlation/tenant IDs
- Request context propagation by explicit parameter passing
- Caller metadata on error records and execution-time tracking
"""

__version__ = "1.0.0"

from ctxlog.context import (
    CORRELATION_ID_KEY,
    TENANT_ID_KEY,
    RequestContext,
    get_correlation_id,
    get_tenant_id,
)
from ctxlog.engine import Entry, LoggingEngine
from ctxlog.exceptions import CtxlogError, InvalidLevelError, PanicError
from ctxlog.levels import Level, from_stdlib_level, parse_level, to_log_level
from ctxlog.logger import Fields, Logger
from ctxlog.structured import StructuredLogger, new_logger, new_nop_logger

__all__ = [
    "__version__",
    # Levels
    "Level",
    "parse_level",
    "to_log_level",
    "from_stdlib_level",
    # Context
    "CORRELATION_ID_KEY",
    "TENANT_ID_KEY",
    "RequestContext",
    "get_correlation_id",
    "get_tenant_id",
    # Logging
    "Entry",
    "Fields",
    "Logger",
    "LoggingEngine",
    "StructuredLogger",
    "new_logger",
    "new_nop_logger",
    # Errors
    "CtxlogError",
    "InvalidLevelError",
    "PanicError",
]
