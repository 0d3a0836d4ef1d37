"""
ctxlog Request Context

Request-scoped values (correlation and tenant IDs) travel in an explicit
context object passed to ``Logger.with_context``. Any ``Mapping`` works;
``RequestContext`` is an immutable carrier for callers that need one.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

CORRELATION_ID_KEY = "correlationId"
TENANT_ID_KEY = "tenantId"


class RequestContext(Mapping[str, Any]):
    """
    Immutable key/value carrier for one request or operation.

    Usage:
        ctx = RequestContext().with_value(CORRELATION_ID_KEY, "abc123")
        logger.with_context(ctx).info("handling request")
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def with_value(self, key: str, value: Any) -> "RequestContext":
        """Create a new context with one extra value."""
        return RequestContext({**self._values, key: value})

    def value(self, key: str) -> Any:
        """Get a value, or None when absent."""
        return self._values.get(key)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RequestContext({dict(self._values)!r})"


def _get_string(ctx: Optional[Mapping[str, Any]], key: str) -> str:
    if ctx is None:
        return ""
    try:
        value = ctx.get(key)
    except (AttributeError, TypeError):
        return ""
    if isinstance(value, str):
        return value
    return ""


def get_correlation_id(ctx: Optional[Mapping[str, Any]]) -> str:
    """Get the correlation ID from a request context, or ``""``."""
    return _get_string(ctx, CORRELATION_ID_KEY)


def get_tenant_id(ctx: Optional[Mapping[str, Any]]) -> str:
    """Get the tenant ID from a request context, or ``""``."""
    return _get_string(ctx, TENANT_ID_KEY)
