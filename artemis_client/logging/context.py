"""Correlation ID of the current call chain.

Kept in a ContextVar so each asyncio task sees its own value.
"""

from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, or None."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)
