"""
ctxlog Logging Engine

The root backend shared by every logger derived from it:
- Severity threshold (process-wide for the engine)
- Output destination
- structlog processor chain and renderer
- Exit hook used by fatal records

Entries are immutable; attaching fields or a context returns a new Entry.
"""

from __future__ import annotations

import sys
from types import MappingProxyType
from typing import Any, Callable, Dict, IO, Mapping, Optional, Union

import structlog

from ctxlog.exceptions import PanicError
from ctxlog.levels import Level, parse_level, to_log_level

LEVEL_FIELD = "level"
ERROR_FIELD = "error"

# Keys written by the engine or structlog; clashing user fields get a "fields." prefix.
RESERVED_FIELDS = ("level", "event", "timestamp")

RENDERERS = ("json", "console")

Output = Union[str, IO[str], None]


def sprint(*args: Any) -> str:
    """Join message operands, adding a space between two non-string operands."""
    parts = []
    previous_is_str = True
    for index, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if index > 0 and not is_str and not previous_is_str:
            parts.append(" ")
        parts.append(arg if is_str else str(arg))
        previous_is_str = is_str
    return "".join(parts)


class LoggingEngine:
    """
    Root logging backend.

    The threshold and output are shared mutable state: treat ``set_level``
    and ``set_output`` as startup configuration, or synchronise callers.

    Usage:
        engine = LoggingEngine(level=Level.DEBUG, output=sys.stdout)
        engine.new_entry().with_field("user", "bob").info("signed in")
    """

    def __init__(
        self,
        level: Level = Level.INFO,
        output: Output = "stderr",
        renderer: str = "json",
        exit_func: Optional[Callable[[int], Any]] = None,
    ):
        if renderer not in RENDERERS:
            raise ValueError(f"Unknown renderer: {renderer}")

        self._level = to_log_level(parse_level(level))
        self.renderer = renderer
        self.exit_func = exit_func or sys.exit

        self._processors = self._build_processors(renderer)
        self._output: Output = None
        self._sink: Any = None
        self.set_output(output)

    def _build_processors(self, renderer: str) -> list:
        """Build the structlog processor chain."""
        if renderer == "console":
            final = structlog.dev.ConsoleRenderer(colors=False)
        else:
            final = structlog.processors.JSONRenderer(default=str)

        return [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            final,
        ]

    # === Threshold ===

    @property
    def level(self) -> Level:
        return self._level

    def set_level(self, name: str) -> Level:
        """
        Set the threshold from a level name.

        Raises InvalidLevelError for unknown names; the threshold is
        left untouched in that case.
        """
        level = Level.from_backend(name)
        self._level = level
        self.new_entry().with_field(
            "threshold", parse_level(level)
        ).debug("Log threshold changed")
        return level

    def get_level(self) -> Level:
        return self._level

    def is_enabled(self, level: Level) -> bool:
        """Check whether records at ``level`` pass the threshold."""
        return level <= self._level

    # === Output ===

    @property
    def output(self) -> Output:
        return self._output

    def set_output(self, output: Output) -> None:
        """
        Redirect rendered records.

        Accepts a writable text stream, ``"stdout"`` or ``"stderr"``.
        ``None`` discards every record.
        """
        if output is None:
            self._sink = structlog.ReturnLogger()
        elif output == "stdout":
            self._sink = structlog.PrintLogger(file=sys.stdout)
        elif output == "stderr":
            self._sink = structlog.PrintLogger(file=sys.stderr)
        elif isinstance(output, str):
            raise ValueError(f"Unknown output: {output}")
        else:
            self._sink = structlog.PrintLogger(file=output)
        self._output = output

    # === Entries ===

    def new_entry(self) -> "Entry":
        """Create an empty entry bound to this engine."""
        return Entry(self)

    def write(self, entry: "Entry", level: Level, message: str) -> Any:
        """Render one record through structlog and hand it to the sink."""
        context = dict(entry.data)
        for key in RESERVED_FIELDS:
            if key in context:
                context[f"fields.{key}"] = context.pop(key)
        context[LEVEL_FIELD] = parse_level(level)
        bound = structlog.BoundLogger(self._sink, self._processors, context)
        return bound.msg(message)


class Entry:
    """
    Immutable log entry: engine reference, fields and bound context.

    Every ``with_*`` method returns a new Entry.
    """

    __slots__ = ("_engine", "_data", "_context")

    def __init__(
        self,
        engine: LoggingEngine,
        data: Optional[Mapping[str, Any]] = None,
        context: Optional[Mapping[str, Any]] = None,
    ):
        self._engine = engine
        self._data = MappingProxyType(dict(data or {}))
        self._context = context

    @property
    def engine(self) -> LoggingEngine:
        return self._engine

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    @property
    def context(self) -> Optional[Mapping[str, Any]]:
        return self._context

    def with_field(self, key: str, value: Any) -> "Entry":
        return self.with_fields({key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> "Entry":
        data: Dict[str, Any] = {**self._data, **fields}
        return Entry(self._engine, data, self._context)

    def with_error(self, err: BaseException) -> "Entry":
        return self.with_field(ERROR_FIELD, err)

    def with_context(self, ctx: Optional[Mapping[str, Any]]) -> "Entry":
        return Entry(self._engine, self._data, ctx)

    def log(self, level: Level, *args: Any) -> None:
        """Emit a record if the engine threshold allows it."""
        if self._engine.is_enabled(level):
            self._engine.write(self, level, sprint(*args))

    def trace(self, *args: Any) -> None:
        self.log(Level.TRACE, *args)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def warn(self, *args: Any) -> None:
        self.log(Level.WARN, *args)

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    def fatal(self, *args: Any) -> None:
        """Log, then call the engine's exit hook with status 1."""
        self.log(Level.FATAL, *args)
        self._engine.exit_func(1)

    def panic(self, *args: Any) -> None:
        """Log, then raise PanicError."""
        message = sprint(*args)
        self.log(Level.PANIC, message)
        raise PanicError(message, self)

    def __repr__(self) -> str:
        return f"Entry(data={dict(self._data)!r})"
