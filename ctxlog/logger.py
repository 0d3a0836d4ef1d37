"""
ctxlog Logger Interface

Backend-agnostic capability set: level control, field attachment,
request context and message emission. Implementations return a new
logger from every ``set_*``/``with_*`` call instead of mutating.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from ctxlog.levels import Level

Fields = Dict[str, Any]

Timestamp = Union[float, datetime]


@runtime_checkable
class Logger(Protocol):
    """Generic logger interface."""

    def set_level(self, level: Level) -> None:
        """Set the severity threshold of the root backend."""

    def get_level(self) -> Level:
        """Get the current severity threshold."""

    def set_area(self, area: str) -> "Logger":
        """Attach the ``Area`` field."""

    def set_operation(self, operation: str) -> "Logger":
        """Attach the ``Operation`` field."""

    def set_correlation_id(self, correlation_id: str) -> "Logger":
        """Attach a correlation ID; empty IDs are ignored."""

    def get_correlation_id(self) -> str:
        """Get the correlation ID of this logger."""

    def set_tenant_id(self, tenant_id: str) -> "Logger":
        """Attach a tenant ID; empty IDs are ignored."""

    def get_tenant_id(self) -> str:
        """Get the tenant ID of this logger."""

    def with_field(self, key: str, value: Any) -> "Logger":
        """Attach one field."""

    def with_fields(self, fields: Mapping[str, Any]) -> "Logger":
        """Attach a batch of fields."""

    def with_error(self, err: BaseException) -> "Logger":
        """Attach an error as a single field."""

    def with_context(self, ctx: Optional[Mapping[str, Any]]) -> "Logger":
        """Take correlation and tenant IDs from a request context."""

    def trace(self, *args: Any) -> None: ...

    def debug(self, *args: Any) -> None: ...

    def info(self, *args: Any) -> None: ...

    def warn(self, *args: Any) -> None: ...

    def error(self, *args: Any) -> None: ...

    def fatal(self, *args: Any) -> None: ...

    def panic(self, *args: Any) -> None: ...

    def track_func_time(self, start: Timestamp) -> None:
        """Log the time elapsed since ``start`` at debug level."""
