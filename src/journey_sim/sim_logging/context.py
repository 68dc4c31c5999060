"""Per-thread log fields for the trip a thread is working on.

The scheduler worker and the host's control calls run on different threads,
so each keeps its own stack of fields. Inner blocks shadow outer ones and are
popped on exit.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class LogContext:
    _local = threading.local()

    @classmethod
    def _frames(cls) -> list[dict[str, Any]]:
        frames = getattr(cls._local, "frames", None)
        if frames is None:
            frames = cls._local.frames = []
        return frames

    @classmethod
    def push(cls, **fields: Any) -> None:
        cls._frames().append(fields)

    @classmethod
    def pop(cls) -> None:
        frames = cls._frames()
        if frames:
            frames.pop()

    @classmethod
    def get(cls) -> dict[str, Any]:
        """Fields currently in effect on this thread."""
        merged: dict[str, Any] = {}
        for frame in cls._frames():
            merged.update(frame)
        return merged

    @classmethod
    def clear(cls) -> None:
        cls._local.frames = []


class ContextFilter(logging.Filter):
    """Copies the thread's fields onto records that don't already carry them."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in LogContext.get().items():
            record.__dict__.setdefault(key, value)
        return True


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    LogContext.push(**fields)
    try:
        yield
    finally:
        LogContext.pop()


@contextmanager
def log_trip_context(
    trip_id: str,
    booking_id: str | None = None,
    correlation_id: str | None = None,
    **fields: Any,
) -> Iterator[None]:
    """Tag records with a trip. The correlation id defaults to the trip id."""
    fields["trip_id"] = trip_id
    fields["correlation_id"] = correlation_id or trip_id
    if booking_id is not None:
        fields["booking_id"] = booking_id
    with log_context(**fields):
        yield
