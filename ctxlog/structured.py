"""
ctxlog Structured Logger

structlog-backed implementation of the Logger interface.

Usage:
    logger = new_logger(Level.INFO)
    log = logger.with_context(ctx).set_area("billing").set_operation("charge")
    log.info("charging card")

    start = time.perf_counter()
    try:
        ...
    finally:
        log.track_func_time(start)
"""

from __future__ import annotations

import inspect
import time
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from ctxlog.context import get_correlation_id, get_tenant_id
from ctxlog.engine import Entry, LoggingEngine, Output
from ctxlog.levels import Level, parse_level
from ctxlog.logger import Timestamp

AREA_FIELD = "Area"
OPERATION_FIELD = "Operation"
CORRELATION_ID_FIELD = "CorrelationID"
TENANT_ID_FIELD = "TenantID"
FILE_FIELD = "File"
LINE_FIELD = "Line"
FUNC_FIELD = "Func"
EXECUTION_TIME_FIELD = "executionTime"


class StructuredLogger:
    """
    Immutable logger value holding an entry plus correlation/tenant IDs.

    Derived loggers share the root engine (threshold and output) but
    never share fields: each ``set_*``/``with_*`` returns a copy.
    """

    __slots__ = ("_entry", "_correlation_id", "_tenant_id")

    def __init__(
        self,
        entry: Entry,
        correlation_id: str = "",
        tenant_id: str = "",
    ):
        self._entry = entry
        self._correlation_id = correlation_id
        self._tenant_id = tenant_id

    def _derive(self, entry: Entry) -> "StructuredLogger":
        return StructuredLogger(entry, self._correlation_id, self._tenant_id)

    @property
    def entry(self) -> Entry:
        return self._entry

    @property
    def fields(self) -> Mapping[str, Any]:
        return self._entry.data

    @property
    def context(self) -> Optional[Mapping[str, Any]]:
        return self._entry.context

    # === Level ===

    def set_level(self, level: Level) -> None:
        """
        Set the threshold on the root engine.

        Raises InvalidLevelError when the engine rejects the level name.
        """
        self._entry.engine.set_level(parse_level(level))

    def get_level(self) -> Level:
        return self._entry.engine.get_level()

    def set_output(self, output: Output) -> None:
        """Redirect the root engine's output (stream, "stdout", "stderr" or None)."""
        self._entry.engine.set_output(output)

    # === Context ===

    def set_area(self, area: str) -> "StructuredLogger":
        return self._derive(self._entry.with_field(AREA_FIELD, area))

    def set_operation(self, operation: str) -> "StructuredLogger":
        return self._derive(self._entry.with_field(OPERATION_FIELD, operation))

    def set_correlation_id(self, correlation_id: str) -> "StructuredLogger":
        if not correlation_id:
            return self
        return StructuredLogger(
            self._entry.with_field(CORRELATION_ID_FIELD, correlation_id),
            correlation_id,
            self._tenant_id,
        )

    def get_correlation_id(self) -> str:
        return self._correlation_id

    def set_tenant_id(self, tenant_id: str) -> "StructuredLogger":
        if not tenant_id:
            return self
        return StructuredLogger(
            self._entry.with_field(TENANT_ID_FIELD, tenant_id),
            self._correlation_id,
            tenant_id,
        )

    def get_tenant_id(self) -> str:
        return self._tenant_id

    def with_field(self, key: str, value: Any) -> "StructuredLogger":
        return self._derive(self._entry.with_field(key, value))

    def with_fields(self, fields: Mapping[str, Any]) -> "StructuredLogger":
        return self._derive(self._entry.with_fields(fields))

    def with_error(self, err: BaseException) -> "StructuredLogger":
        return self._derive(self._entry.with_error(err))

    def with_context(self, ctx: Optional[Mapping[str, Any]]) -> "StructuredLogger":
        """
        Take correlation and tenant IDs from ``ctx`` and bind it to the entry.

        Missing or non-string values are ignored.
        """
        correlation_id = get_correlation_id(ctx)
        tenant_id = get_tenant_id(ctx)
        logger = self.set_correlation_id(correlation_id).set_tenant_id(tenant_id)
        return logger._derive(logger._entry.with_context(ctx))

    # === Emission ===

    def log(self, level: Level, *args: Any) -> None:
        """
        Emit at ``level`` without caller metadata.

        Never exits or raises, whatever the level.
        """
        self._entry.log(level, *args)

    def trace(self, *args: Any) -> None:
        self._entry.trace(*args)

    def debug(self, *args: Any) -> None:
        self._entry.debug(*args)

    def info(self, *args: Any) -> None:
        self._entry.info(*args)

    def warn(self, *args: Any) -> None:
        self._entry.warn(*args)

    def warning(self, *args: Any) -> None:
        """Alias for warn."""
        self._entry.warn(*args)

    def error(self, *args: Any) -> None:
        self._add_caller_info().error(*args)

    def fatal(self, *args: Any) -> None:
        self._add_caller_info().fatal(*args)

    def panic(self, *args: Any) -> None:
        self._add_caller_info().panic(*args)

    def _add_caller_info(self) -> Entry:
        """Attach File/Line/Func of the frame two levels above this one."""
        frame = inspect.currentframe()
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            return self._entry

        try:
            code = caller.f_code
            module = caller.f_globals.get("__name__", "")
            func_name = f"{module}.{code.co_name}" if module else code.co_name
            return self._entry.with_fields({
                FILE_FIELD: code.co_filename,
                LINE_FIELD: caller.f_lineno,
                FUNC_FIELD: func_name,
            })
        finally:
            del frame, caller

    def track_func_time(self, start: Timestamp) -> None:
        """
        Log execution time since ``start`` at debug level.

        ``start`` is a ``time.perf_counter()`` reading or a datetime.
        Does nothing unless debug records are enabled.
        """
        if self.get_level() < Level.DEBUG:
            return

        elapsed = _elapsed_since(start)
        self._add_caller_info().with_field(
            EXECUTION_TIME_FIELD, elapsed
        ).debug("func execution completed")

    def __repr__(self) -> str:
        return (
            f"StructuredLogger(correlation_id={self._correlation_id!r}, "
            f"tenant_id={self._tenant_id!r}, fields={dict(self.fields)!r})"
        )


def _elapsed_since(start: Timestamp) -> timedelta:
    if isinstance(start, datetime):
        now = datetime.now(start.tzinfo)
        return now - start
    return timedelta(seconds=time.perf_counter() - start)


def new_logger(
    initial_level: Level = Level.INFO,
    output: Output = "stderr",
    renderer: str = "json",
) -> StructuredLogger:
    """Create a root logger bound to a fresh engine."""
    engine = LoggingEngine(level=initial_level, output=output, renderer=renderer)
    return StructuredLogger(engine.new_entry())


def new_nop_logger() -> StructuredLogger:
    """Create a root logger that discards all records."""
    engine = LoggingEngine(output=None)
    return StructuredLogger(engine.new_entry())
