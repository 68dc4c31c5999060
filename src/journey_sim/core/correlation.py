"""Correlation ids for following one trip's feed through the logs.

The scheduler worker binds its session id and the trip id (the correlation id)
for the lifetime of its loop. Records logged inside pick both up through
CorrelationFilter.
"""

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar

current_correlation_id: ContextVar[str | None] = ContextVar(
    "journey_correlation_id", default=None
)
current_session_id: ContextVar[str | None] = ContextVar("journey_session_id", default=None)


@contextmanager
def _bound(var: ContextVar[str | None], value: str) -> Iterator[None]:
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)


def with_correlation(correlation_id: str) -> AbstractContextManager[None]:
    """Bind the correlation id (normally the trip id) for a block."""
    return _bound(current_correlation_id, correlation_id)


def with_session(session_id: str) -> AbstractContextManager[None]:
    """Bind the simulation session id for a block."""
    return _bound(current_session_id, session_id)


def get_current_correlation_id() -> str | None:
    return current_correlation_id.get()


def get_current_session_id() -> str | None:
    return current_session_id.get()


class CorrelationFilter(logging.Filter):
    """Stamps session and correlation ids on every record.

    A correlation id already on the record, from ``extra`` or the trip log
    context, survives unless one is bound in the current context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        bound = current_correlation_id.get()
        if bound is not None:
            record.correlation_id = bound
        elif not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        record.session_id = current_session_id.get() or "-"
        return True
