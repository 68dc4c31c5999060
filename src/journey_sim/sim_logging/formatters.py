"""Record formatters: JSON lines for shipping, a compact line for terminals."""

import json
import logging
from datetime import UTC, datetime


class JSONFormatter(logging.Formatter):
    CONTEXT_FIELDS = ("trip_id", "booking_id", "session_id", "correlation_id", "error_code")

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
            "env": self.environment,
        }
        entry.update(
            {name: getattr(record, name) for name in self.CONTEXT_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class DevFormatter(logging.Formatter):
    """Human-readable line; the thread name shows which scheduler logged it."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s [%(threadName)s corr=%(correlation_id)s] "
            "%(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
